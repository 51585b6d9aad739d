"""Exceptions raised by source-layout analysis."""

from __future__ import annotations


class SourceLayoutError(RuntimeError):
    """Raised when the filesystem cannot be inspected for a candidate root."""


class AnalysisCancelled(SourceLayoutError):
    """Raised when a caller cancels analysis during a recursive search."""


class NotAnalyzedError(RuntimeError):
    """Raised when computed outputs are read before analysis ran."""


class TargetsError(RuntimeError):
    """Raised when a target declaration file cannot be interpreted."""


__all__ = ["AnalysisCancelled", "NotAnalyzedError", "SourceLayoutError", "TargetsError"]
