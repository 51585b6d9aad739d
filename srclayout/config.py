"""Configuration loading for srclayout (.srclayout.yml)."""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

CONFIG_FILENAME = ".srclayout.yml"
REPORT_FORMATS = ("text", "json")

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class AnalysisConfig:
    """Settings steering source-root analysis."""

    source_extensions: List[str] = field(default_factory=lambda: [".java"])
    encoding: str = "utf-8"
    follow_symlinks: bool = True


@dataclass
class ReportConfig:
    """How analysis results are rendered by the CLI."""

    format: str = "text"


@dataclass
class SrcLayoutConfig:
    """Represents the settings defined in .srclayout.yml."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def load_config(config_path: Path) -> SrcLayoutConfig:
    """Load configuration from ``config_path`` (a file, or a directory holding one).

    A missing file yields the defaults.
    """
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return SrcLayoutConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    return SrcLayoutConfig(
        analysis=_parse_analysis(_section(data, "analysis")),
        report=_parse_report(_section(data, "report")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' in {CONFIG_FILENAME} must be a mapping")
    return value


def _parse_analysis(data: Dict[str, Any]) -> AnalysisConfig:
    analysis = AnalysisConfig()
    if "source_extensions" in data:
        analysis.source_extensions = _source_extensions(data["source_extensions"])
    if "encoding" in data:
        analysis.encoding = _encoding(data["encoding"])
    if "follow_symlinks" in data:
        analysis.follow_symlinks = _flag("analysis.follow_symlinks", data["follow_symlinks"])
    return analysis


def _parse_report(data: Dict[str, Any]) -> ReportConfig:
    report = ReportConfig()
    if "format" in data:
        report_format = str(data["format"]).strip().lower()
        if report_format not in REPORT_FORMATS:
            raise ConfigError(
                f"Unsupported report format '{report_format}' "
                f"(expected one of: {', '.join(REPORT_FORMATS)})"
            )
        report.format = report_format
    return report


def _source_extensions(value: Any) -> List[str]:
    """Normalise ``java`` / ``.java`` (or a list of them) to dotted suffixes."""
    items = [value] if isinstance(value, str) else value
    if not isinstance(items, list) or not all(isinstance(item, str) for item in items):
        raise ConfigError("analysis.source_extensions must be a string or a list of strings")
    extensions = [item if item.startswith(".") else f".{item}" for item in items if item]
    if not extensions:
        raise ConfigError("analysis.source_extensions must name at least one extension")
    return extensions


def _encoding(value: Any) -> str:
    name = str(value)
    try:
        codecs.lookup(name)
    except LookupError as exc:
        raise ConfigError(f"Unknown source encoding '{name}'") from exc
    return name


def _flag(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "REPORT_FORMATS",
    "ReportConfig",
    "SrcLayoutConfig",
    "load_config",
]
