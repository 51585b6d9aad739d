"""CLI parser and entrypoint tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from srclayout.cli import _build_parser, main
from tests._fixtures.source_tree import SourceTreeBuilder


@pytest.fixture(autouse=True)
def _restore_srclayout_logger():
    logger = logging.getLogger("srclayout")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "analyze"])
    assert args.verbose is True
    assert args.command == "analyze"
    assert args.targets == "targets.yml"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "--verbose"])
    assert args.verbose is True
    assert args.command == "analyze"


def test_cli_accepts_format_and_config_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "build/targets.yml", "--format", "json", "--config", "cfg.yml"])
    assert args.targets == "build/targets.yml"
    assert args.format == "json"
    assert args.config == "cfg.yml"


def test_cli_rejects_unknown_format() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["analyze", "--format", "xml"])


def _write_targets(source_tree: SourceTreeBuilder, content: str) -> Path:
    targets = source_tree.path() / "targets.yml"
    targets.write_text(content, encoding="utf-8")
    return targets


def test_main_prints_text_report(source_tree: SourceTreeBuilder, capsys) -> None:
    source_tree.java("src/main/java/com/acme/Foo.java", "com.acme")
    targets = _write_targets(
        source_tree,
        "targets:\n  - name: lib\n    srcs:\n      - src/main/java/com/acme/Foo.java\n",
    )

    main(["analyze", str(targets)])

    out = capsys.readouterr().out
    assert out.splitlines()[:3] == [
        "lib: consistent",
        "  src/main/java (1 files)",
        "    packages: com/acme",
    ]


def test_main_uses_configured_report_format(source_tree: SourceTreeBuilder, capsys) -> None:
    source_tree.java("src/com/acme/Foo.java", "com.acme")
    source_tree.write({".srclayout.yml": "report:\n  format: json\n"})
    targets = _write_targets(
        source_tree, "targets:\n  - name: lib\n    srcs: [src/com/acme/Foo.java]\n"
    )

    main(["analyze", str(targets)])

    payload = json.loads(capsys.readouterr().out)
    assert payload["targets"][0]["source_directories"][0]["path"] == "src"


def test_main_exits_non_zero_on_failed_target(source_tree: SourceTreeBuilder, capsys) -> None:
    targets = _write_targets(
        source_tree, "targets:\n  - name: broken\n    srcs: [gone/Missing.java]\n"
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(targets), "--format", "json"])

    assert excinfo.value.code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["targets"][0]["state"] == "failed"


def test_main_reports_invalid_declarations(source_tree: SourceTreeBuilder, capsys) -> None:
    targets = _write_targets(source_tree, "targets: nope\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(targets)])

    assert excinfo.value.code == 1
    assert "targets" in capsys.readouterr().err


def test_main_writes_log_file_given_after_command(source_tree: SourceTreeBuilder, tmp_path: Path) -> None:
    source_tree.java("src/com/acme/Foo.java", "com.acme")
    targets = _write_targets(
        source_tree, "targets:\n  - name: lib\n    srcs: [src/com/acme/Foo.java]\n"
    )
    log_file = tmp_path / "srclayout.log"

    main(["analyze", str(targets), "-v", "--log-file", str(log_file)])

    assert "Loaded 1 target declarations" in log_file.read_text(encoding="utf-8")
