"""Split-package detection by cross-checking declared entries against the disk.

A source folder handed to the IDE must be fully explained by the target's
declared sources. Two granularities are checked independently:

* the shallow pass compares each parent directory holding declared files with
  the source files physically present directly in it;
* the deep pass compares each file-backed candidate root with every source file
  found recursively below it.

Glob-backed roots are exempt from the deep pass because their completeness is
governed by the pattern itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Callable, Collection, List, Optional

from .errors import SourceLayoutError
from .filesystem import CancellationToken, SourceFileSystem
from .grouping import GroupingResult
from .logging import get_logger

SHALLOW = "shallow"
DEEP = "deep"

_logger = get_logger("split_packages")


@dataclass(frozen=True)
class SplitFinding:
    """A directory whose on-disk source files differ from what was declared."""

    root: PurePosixPath
    directory: Path
    declared: int
    found: int
    granularity: str

    def describe(self) -> str:
        if self.granularity == SHALLOW:
            return (
                f"Folder '{self.directory}' contains {self.found} source file(s) but "
                f"{self.declared} are declared. This is a split-package scenario which is "
                "challenging to support in IDEs! Consider re-structuring your source code "
                "into separate folder hierarchies and build packages."
            )
        return (
            f"Folder '{self.directory}' contains {self.found} source file(s) (including "
            f"sub-packages) but {self.declared} are declared. This is a scenario which is "
            "challenging to support in IDEs! Consider re-structuring your source code "
            "into separate folder hierarchies and build packages."
        )


def find_shallow_splits(
    grouping: GroupingResult,
    *,
    base_location: Path,
    filesystem: SourceFileSystem,
    is_source_file: Callable[[Path], bool],
    is_covered: Callable[[PurePosixPath], bool],
) -> List[SplitFinding]:
    """Compare declared files per parent directory with the directory listing."""
    findings: List[SplitFinding] = []
    for parent, entries in grouping.by_parent.items():
        if is_covered(parent):
            continue
        directory = Path(base_location, *parent.parts)
        try:
            found = sum(1 for child in filesystem.list_dir(directory) if is_source_file(child))
        except OSError as exc:
            raise SourceLayoutError(f"Error searching files in '{directory}'") from exc

        declared = len(entries)
        if found != declared:
            findings.append(
                SplitFinding(
                    root=grouping.root_of_parent[parent],
                    directory=directory,
                    declared=declared,
                    found=found,
                    granularity=SHALLOW,
                )
            )
    _logger.debug("Shallow pass checked %d directories", len(grouping.by_parent))
    return findings


def find_deep_splits(
    grouping: GroupingResult,
    *,
    base_location: Path,
    filesystem: SourceFileSystem,
    is_source_file: Callable[[Path], bool],
    is_covered: Callable[[PurePosixPath], bool],
    already_split: Collection[PurePosixPath] = (),
    cancel: Optional[CancellationToken] = None,
) -> List[SplitFinding]:
    """Compare each file-backed root with all source files found below it."""
    findings: List[SplitFinding] = []
    for root, entries in grouping.file_roots().items():
        if root in already_split or is_covered(root):
            continue
        directory = Path(base_location, *root.parts)
        try:
            found = sum(1 for _ in filesystem.find_files(directory, is_source_file, cancel))
        except OSError as exc:
            raise SourceLayoutError(f"Error searching files in '{directory}'") from exc

        declared = len(entries)
        if found != declared:
            findings.append(
                SplitFinding(
                    root=root,
                    directory=directory,
                    declared=declared,
                    found=found,
                    granularity=DEEP,
                )
            )
    return findings


__all__ = ["DEEP", "SHALLOW", "SplitFinding", "find_deep_splits", "find_shallow_splits"]
