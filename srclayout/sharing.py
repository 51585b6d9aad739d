"""Suppression of split-package findings for intentionally shared sources."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .source_info import SourceInfo


def _absolute_parts(base_location: Path, root: PurePosixPath) -> Tuple[str, ...]:
    return Path(base_location, *root.parts).parts


class SharedSourceFilter:
    """Decides whether a candidate root is already covered by a sibling target.

    Build tools allow the same file to be compiled by several targets, e.g. a
    library exposing all code plus one test target per test class. Roots the
    sibling already resolved, and anything below them, must not be reported
    as split packages again.
    """

    def __init__(self, base_location: Path, shared: Optional["SourceInfo"] = None) -> None:
        self._base_location = base_location
        self._shared_roots: List[Tuple[str, ...]] = []
        if shared is not None and shared.has_source_directories():
            self._shared_roots = [
                _absolute_parts(shared.base_location, root) for root in shared.source_directories
            ]

    @property
    def active(self) -> bool:
        return bool(self._shared_roots)

    def covers(self, root: PurePosixPath) -> bool:
        if not self._shared_roots:
            return False
        candidate = _absolute_parts(self._base_location, root)
        return any(candidate[: len(shared)] == shared for shared in self._shared_roots)


__all__ = ["SharedSourceFilter"]
