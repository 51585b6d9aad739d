"""Rendering of target analysis reports."""

from __future__ import annotations

import json
from pathlib import PurePosixPath
from typing import Dict, List, Sequence

from .models import FileBucket, GlobEntry
from .source_info import SourceInfo
from .targets import TargetReport


def report_to_dict(report: TargetReport) -> Dict[str, object]:
    """Return a JSON-serialisable view of one target report."""
    if report.info is None:
        return {"name": report.name, "state": "failed", "error": report.error}

    info = report.info
    directories: List[Dict[str, object]] = []
    for root, contents in info.source_directory_map.items():
        entry: Dict[str, object] = {"path": root.as_posix()}
        if isinstance(contents, FileBucket):
            entry["kind"] = "files"
            entry["files"] = [str(file) for file in contents.files]
            entry["packages"] = [_package_name(package) for package in info.detected_packages_for(root)]
        elif isinstance(contents, GlobEntry):
            entry["kind"] = "glob"
            entry["include"] = list(contents.include) if contents.include is not None else None
            entry["exclude"] = list(contents.exclude) if contents.exclude is not None else None
        directories.append(entry)

    return {
        "name": report.name,
        "state": info.state.value,
        "base": str(info.base_location),
        "source_directories": directories,
        "files_without_common_root": [str(file) for file in info.source_files_without_common_root],
        "split_roots": [root.as_posix() for root in info.split_roots],
        "diagnostics": [
            {"severity": diagnostic.severity, "message": diagnostic.message, "path": diagnostic.path}
            for diagnostic in info.diagnostics
        ],
    }


def render_json(reports: Sequence[TargetReport]) -> str:
    return json.dumps({"targets": [report_to_dict(report) for report in reports]}, indent=2)


def render_text(reports: Sequence[TargetReport]) -> str:
    lines: List[str] = []
    for report in reports:
        if report.info is None:
            lines.append(f"{report.name}: failed")
            lines.append(f"  error: {report.error}")
            continue
        lines.append(f"{report.name}: {report.info.state.value}")
        lines.extend(_source_info_lines(report.info))
    return "\n".join(lines) + "\n"


def _source_info_lines(info: SourceInfo) -> List[str]:
    lines: List[str] = []
    for root, contents in info.source_directory_map.items():
        if isinstance(contents, GlobEntry):
            lines.append(f"  {root.as_posix()} (glob)")
            if contents.include is not None:
                lines.append(f"    include: {', '.join(contents.include)}")
            if contents.exclude is not None:
                lines.append(f"    exclude: {', '.join(contents.exclude)}")
            continue
        packages = ", ".join(
            _package_name(package) or "(default)" for package in info.detected_packages_for(root)
        )
        lines.append(f"  {root.as_posix()} ({len(contents)} files)")
        lines.append(f"    packages: {packages}")

    if info.has_source_files_without_common_root():
        lines.append("  files without common root:")
        lines.extend(f"    {file}" for file in info.source_files_without_common_root)

    for diagnostic in info.diagnostics:
        lines.append(f"  {diagnostic.severity}: {diagnostic.message}")
    return lines


def _package_name(package: PurePosixPath) -> str:
    return package.as_posix() if package.parts else ""


RENDERERS = {"text": render_text, "json": render_json}


__all__ = ["RENDERERS", "render_json", "render_text", "report_to_dict"]
