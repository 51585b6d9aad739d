"""Tests for srclayout.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from srclayout.config import AnalysisConfig, ConfigError, ReportConfig, SrcLayoutConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, SrcLayoutConfig)
    assert config.analysis == AnalysisConfig()
    assert config.analysis.source_extensions == [".java"]
    assert config.analysis.encoding == "utf-8"
    assert config.analysis.follow_symlinks is True
    assert config.report == ReportConfig(format="text")


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".srclayout.yml"
    config_file.write_text(
        """
analysis:
  source_extensions: [java, ".kt"]
  encoding: "latin-1"
  follow_symlinks: "no"
report:
  format: JSON
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.analysis.source_extensions == [".java", ".kt"]
    assert config.analysis.encoding == "latin-1"
    assert config.analysis.follow_symlinks is False
    assert config.report.format == "json"


def test_load_config_accepts_single_extension_string(tmp_path: Path) -> None:
    (tmp_path / ".srclayout.yml").write_text(
        "analysis:\n  source_extensions: .groovy\n", encoding="utf-8"
    )

    config = load_config(tmp_path)

    assert config.analysis.source_extensions == [".groovy"]


def test_load_config_rejects_unknown_report_format(tmp_path: Path) -> None:
    (tmp_path / ".srclayout.yml").write_text("report:\n  format: html\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".srclayout.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_wraps_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".srclayout.yml").write_text("analysis: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".srclayout.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).analysis == AnalysisConfig()


@pytest.mark.parametrize(
    "content",
    [
        "analysis: [.java]\n",
        "analysis:\n  encoding: not-a-codec\n",
        "analysis:\n  follow_symlinks: sometimes\n",
        "analysis:\n  source_extensions: {java: true}\n",
        "analysis:\n  source_extensions: []\n",
    ],
)
def test_load_config_rejects_invalid_analysis_settings(content: str, tmp_path: Path) -> None:
    (tmp_path / ".srclayout.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
