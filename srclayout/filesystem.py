"""Filesystem access used by source-layout analysis."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Protocol, Set, Tuple

from .errors import AnalysisCancelled


class CancellationToken(Protocol):
    """Anything exposing ``is_set()``, e.g. :class:`threading.Event`."""

    def is_set(self) -> bool:
        """Return True once the caller asked to abort."""


class SourceFileSystem(Protocol):
    """Filesystem operations consumed by :class:`~srclayout.SourceInfo`."""

    def list_dir(self, directory: Path) -> List[Path]:
        """Return the direct children of ``directory`` (raises ``OSError``)."""

    def find_files(
        self,
        root: Path,
        predicate: Callable[[Path], bool],
        cancel: Optional[CancellationToken] = None,
    ) -> Iterator[Path]:
        """Yield regular files below ``root`` accepted by ``predicate``."""

    def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        """Return the whole text of ``path``."""


def _raise(exc: OSError) -> None:
    raise exc


class LocalFileSystem:
    """:class:`SourceFileSystem` backed by the local disk."""

    def __init__(self, *, follow_symlinks: bool = True) -> None:
        self.follow_symlinks = follow_symlinks

    def list_dir(self, directory: Path) -> List[Path]:
        with os.scandir(directory) as entries:
            return [Path(entry.path) for entry in entries]

    def find_files(
        self,
        root: Path,
        predicate: Callable[[Path], bool],
        cancel: Optional[CancellationToken] = None,
    ) -> Iterator[Path]:
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")

        visited: Set[Tuple[int, int]] = set()
        for dirpath, dirnames, filenames in os.walk(
            root, onerror=_raise, followlinks=self.follow_symlinks
        ):
            if cancel is not None and cancel.is_set():
                raise AnalysisCancelled(f"Search in '{root}' was cancelled")

            # symlinked directories may point back up the tree
            stat_result = os.stat(dirpath)
            key = (stat_result.st_dev, stat_result.st_ino)
            if key in visited:
                dirnames[:] = []
                continue
            visited.add(key)

            current = Path(dirpath)
            for filename in filenames:
                path = current / filename
                if predicate(path):
                    yield path

    def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        return path.read_text(encoding=encoding)


def has_extension(extensions: Tuple[str, ...]) -> Callable[[Path], bool]:
    """Return a predicate accepting regular files whose name ends with one of ``extensions``."""

    def _matches(path: Path) -> bool:
        return path.name.endswith(extensions) and path.is_file()

    return _matches


__all__ = ["CancellationToken", "LocalFileSystem", "SourceFileSystem", "has_extension"]
