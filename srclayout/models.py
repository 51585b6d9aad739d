"""Core data models shared across srclayout components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Optional, Tuple, Union

WARNING = "warning"
ERROR = "error"


@dataclass(eq=False)
class FileEntry:
    """A single declared source file of a target."""

    path: PurePosixPath
    location: Path
    detected_package_path: Optional[PurePosixPath] = field(default=None, repr=False)

    @classmethod
    def from_path(cls, base_location: Path, relative: str) -> "FileEntry":
        """Build an entry for ``relative`` (POSIX, relative to ``base_location``)."""
        path = PurePosixPath(relative)
        return cls(path=path, location=Path(base_location, *path.parts))

    @property
    def parent(self) -> PurePosixPath:
        return self.path.parent

    def potential_source_root(self) -> Optional[PurePosixPath]:
        """Return the parent directory with the package path stripped.

        ``None`` means the file does not sit in a directory hierarchy that
        mirrors its package.
        """
        if self.detected_package_path is None:
            raise RuntimeError(f"Package path of '{self.path}' has not been detected")

        parent_parts = self.parent.parts
        package_parts = self.detected_package_path.parts
        if not package_parts:
            return self.parent
        if parent_parts[-len(package_parts):] != package_parts:
            return None
        return PurePosixPath(*parent_parts[: -len(package_parts)])

    def __str__(self) -> str:
        return self.path.as_posix()


@dataclass(frozen=True)
class GlobEntry:
    """A declared ``glob`` over a directory with optional include/exclude patterns."""

    directory: PurePosixPath
    include: Optional[Tuple[str, ...]] = None
    exclude: Optional[Tuple[str, ...]] = None

    def __str__(self) -> str:
        parts = [f"glob({self.directory.as_posix()}"]
        if self.include is not None:
            parts.append(f"include={list(self.include)}")
        if self.exclude is not None:
            parts.append(f"exclude={list(self.exclude)}")
        return ", ".join(parts) + ")"


@dataclass(frozen=True)
class LabelEntry:
    """A label reference in ``srcs`` (generated sources, filegroups, ...)."""

    label: str

    def __str__(self) -> str:
        return self.label


SourceEntry = Union[FileEntry, GlobEntry, LabelEntry]


@dataclass(frozen=True)
class FileBucket:
    """Non-empty, ordered list of file entries resolved to one source root."""

    files: Tuple[FileEntry, ...]

    def __post_init__(self) -> None:
        if not self.files:
            raise ValueError("FileBucket requires at least one file entry")

    def __len__(self) -> int:
        return len(self.files)


RootContents = Union[FileBucket, GlobEntry]


@dataclass(frozen=True)
class Diagnostic:
    """Severity-tagged message collected while analyzing a target."""

    severity: str
    message: str
    path: Optional[str] = None


class AnalysisState(Enum):
    UNANALYZED = "unanalyzed"
    CONSISTENT = "consistent"
    FALLBACK = "fallback"


__all__ = [
    "AnalysisState",
    "Diagnostic",
    "ERROR",
    "FileBucket",
    "FileEntry",
    "GlobEntry",
    "LabelEntry",
    "RootContents",
    "SourceEntry",
    "WARNING",
]
