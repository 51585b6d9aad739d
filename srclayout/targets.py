"""Target declaration files and multi-target analysis runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml

from .config import AnalysisConfig
from .errors import AnalysisCancelled, SourceLayoutError, TargetsError
from .filesystem import CancellationToken, SourceFileSystem
from .logging import get_logger
from .models import FileEntry, GlobEntry, LabelEntry, SourceEntry
from .source_info import SourceInfo

_LABEL_PREFIXES = (":", "//", "@")
_WILDCARDS = ("*", "?", "[")

_logger = get_logger("targets")


@dataclass
class TargetDeclaration:
    """Declared sources of one build target."""

    name: str
    base_location: Path
    srcs: List[SourceEntry] = field(default_factory=list)
    shares_sources_with: Optional[str] = None


@dataclass
class TargetReport:
    """Outcome of analyzing one target."""

    name: str
    info: Optional[SourceInfo] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def split_glob_pattern(pattern: str) -> Tuple[PurePosixPath, str]:
    """Split ``src/main/java/**/*.java`` into its literal directory and the rest."""
    parts = PurePosixPath(pattern).parts
    for index, part in enumerate(parts):
        if any(char in part for char in _WILDCARDS):
            return PurePosixPath(*parts[:index]), "/".join(parts[index:])
    return PurePosixPath(*parts[:-1]), parts[-1] if parts else ""


def parse_entry(raw: Any, base_location: Path) -> SourceEntry:
    """Turn one ``srcs`` item of a declaration file into a source entry."""
    if isinstance(raw, str):
        value = raw.strip()
        if not value:
            raise TargetsError("Empty source entry")
        if value.startswith(_LABEL_PREFIXES):
            return LabelEntry(value)
        return FileEntry.from_path(base_location, value)

    if isinstance(raw, Mapping) and "glob" in raw:
        glob_value = raw["glob"]
        if isinstance(glob_value, str):
            directory, include = split_glob_pattern(glob_value)
            return GlobEntry(directory=directory, include=(include,))
        if isinstance(glob_value, Mapping):
            directory_value = glob_value.get("directory")
            if not isinstance(directory_value, str):
                raise TargetsError("glob entries require a 'directory'")
            return GlobEntry(
                directory=PurePosixPath(directory_value),
                include=_optional_patterns(glob_value.get("include")),
                exclude=_optional_patterns(glob_value.get("exclude")),
            )

    raise TargetsError(f"Unsupported source entry: {raw!r}")


def _optional_patterns(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value)
    raise TargetsError(f"Patterns must be a string or a list, got {value!r}")


def load_targets(path: Path) -> List[TargetDeclaration]:
    """Load target declarations from a YAML file."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise TargetsError(f"Cannot read target declarations from {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise TargetsError(f"Failed to parse {path.name}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("targets"), list):
        raise TargetsError(f"{path.name} must contain a 'targets' list")

    root = path.parent.resolve()
    declarations: List[TargetDeclaration] = []
    for index, raw in enumerate(data["targets"]):
        if not isinstance(raw, dict):
            raise TargetsError(f"Target #{index} must be a mapping")
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise TargetsError(f"Target #{index} is missing a name")
        base_location = root / str(raw.get("base") or ".")
        srcs = raw.get("srcs") or []
        if not isinstance(srcs, list):
            raise TargetsError(f"Target '{name}' must declare 'srcs' as a list")
        shared = raw.get("shares_sources_with")
        declarations.append(
            TargetDeclaration(
                name=name,
                base_location=base_location,
                srcs=[parse_entry(item, base_location) for item in srcs],
                shares_sources_with=str(shared) if shared else None,
            )
        )

    _analysis_order(declarations)
    return declarations


def _analysis_order(declarations: Sequence[TargetDeclaration]) -> List[TargetDeclaration]:
    """Order targets so every shared-source target follows the one it references."""
    by_name: Dict[str, TargetDeclaration] = {}
    for declaration in declarations:
        if declaration.name in by_name:
            raise TargetsError(f"Duplicate target name '{declaration.name}'")
        by_name[declaration.name] = declaration

    ordered: List[TargetDeclaration] = []
    placed: set[str] = set()

    def _place(declaration: TargetDeclaration, chain: Tuple[str, ...]) -> None:
        if declaration.name in placed:
            return
        if declaration.name in chain:
            raise TargetsError(f"Cyclic source sharing: {' -> '.join(chain + (declaration.name,))}")
        reference = declaration.shares_sources_with
        if reference is not None:
            if reference not in by_name:
                raise TargetsError(
                    f"Target '{declaration.name}' shares sources with unknown target '{reference}'"
                )
            _place(by_name[reference], chain + (declaration.name,))
        ordered.append(declaration)
        placed.add(declaration.name)

    for declaration in declarations:
        _place(declaration, ())
    return ordered


def analyze_targets(
    declarations: Sequence[TargetDeclaration],
    *,
    settings: AnalysisConfig | None = None,
    filesystem: SourceFileSystem | None = None,
    cancel: CancellationToken | None = None,
) -> List[TargetReport]:
    """Analyze every target, returning reports in declaration order.

    A hard I/O failure is recorded on that target's report; cancellation
    aborts the whole run.
    """
    reports: Dict[str, TargetReport] = {}
    for declaration in _analysis_order(declarations):
        shared: Optional[SourceInfo] = None
        if declaration.shares_sources_with is not None:
            shared = reports[declaration.shares_sources_with].info

        info = SourceInfo(
            declaration.srcs,
            declaration.base_location,
            shared,
            settings=settings,
            filesystem=filesystem,
        )
        report = TargetReport(name=declaration.name, info=info)
        try:
            info.analyze(cancel)
        except AnalysisCancelled:
            raise
        except SourceLayoutError as exc:
            cause = f": {exc.__cause__}" if exc.__cause__ is not None else ""
            report = TargetReport(name=declaration.name, error=f"{exc}{cause}")
            _logger.error("Analysis of target '%s' failed: %s", declaration.name, report.error)
        reports[declaration.name] = report

    return [reports[declaration.name] for declaration in declarations]


__all__ = [
    "TargetDeclaration",
    "TargetReport",
    "analyze_targets",
    "load_targets",
    "parse_entry",
    "split_glob_pattern",
]
