"""Grouping of declared source entries into candidate source roots."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Union

from .models import ERROR, WARNING, Diagnostic, FileEntry, GlobEntry
from .package_detector import PackagePathDetector


@dataclass
class GroupingResult:
    """Candidate roots built from one target's declared entries.

    ``roots`` maps a root (relative to the base directory) to either a list of
    file entries or a single glob, in encounter order.
    """

    roots: Dict[PurePosixPath, Union[List[FileEntry], GlobEntry]] = field(default_factory=dict)
    by_parent: Dict[PurePosixPath, List[FileEntry]] = field(default_factory=dict)
    root_of_parent: Dict[PurePosixPath, PurePosixPath] = field(default_factory=dict)
    non_conforming: List[FileEntry] = field(default_factory=list)
    rejected_globs: List[GlobEntry] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def file_roots(self) -> Dict[PurePosixPath, List[FileEntry]]:
        return {root: value for root, value in self.roots.items() if isinstance(value, list)}


def group_source_roots(srcs: Iterable[object], detector: PackagePathDetector) -> GroupingResult:
    """Bucket ``srcs`` by candidate source root, recording conflicts as diagnostics."""
    result = GroupingResult()
    for entry in srcs:
        if isinstance(entry, FileEntry):
            _add_file(result, entry, detector)
        elif isinstance(entry, GlobEntry):
            _add_glob(result, entry)
        else:
            result.diagnostics.append(
                Diagnostic(
                    severity=WARNING,
                    message=(
                        f"Found source label reference '{entry}'. "
                        "The project may not be fully supported in the IDE."
                    ),
                    path=str(entry),
                )
            )
    return result


def _add_file(result: GroupingResult, entry: FileEntry, detector: PackagePathDetector) -> None:
    package_path = detector.detect(entry)
    root = entry.potential_source_root()
    if root is None:
        result.diagnostics.append(
            Diagnostic(
                severity=WARNING,
                message=(
                    f"Source file '{entry.path}' (with detected package '{package_path}') "
                    "does not follow the package directory structure. "
                    "Please move it into a folder hierarchy matching its package!"
                ),
                path=str(entry.path),
            )
        )
        result.non_conforming.append(entry)
        return

    glob_directory = next(
        (d for d in (root, entry.parent) if isinstance(result.roots.get(d), GlobEntry)), None
    )
    if glob_directory is not None:
        result.diagnostics.append(
            Diagnostic(
                severity=ERROR,
                message=(
                    f"Source root '{glob_directory}' is already mapped to a glob pattern. "
                    "Please split into separate targets. This cannot be supported in the IDE."
                ),
                path=str(entry.path),
            )
        )
        result.non_conforming.append(entry)
        return

    existing = result.roots.get(root)
    if existing is None:
        result.roots[root] = [entry]
    else:
        existing.append(entry)
    result.by_parent.setdefault(entry.parent, []).append(entry)
    result.root_of_parent[entry.parent] = root


def _add_glob(result: GroupingResult, entry: GlobEntry) -> None:
    root = entry.directory
    existing = result.roots.get(root)
    if existing is not None or root in result.by_parent:
        kind = "another glob pattern" if isinstance(existing, GlobEntry) else "declared files"
        result.diagnostics.append(
            Diagnostic(
                severity=ERROR,
                message=(
                    f"Source root '{root}' is already mapped to {kind}. "
                    "Please split into separate targets. This cannot be supported in the IDE."
                ),
                path=str(entry),
            )
        )
        result.rejected_globs.append(entry)
        return
    result.roots[root] = entry


__all__ = ["GroupingResult", "group_source_roots"]
