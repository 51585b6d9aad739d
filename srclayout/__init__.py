"""Source-layout inference for build targets."""

from .errors import AnalysisCancelled, NotAnalyzedError, SourceLayoutError
from .models import AnalysisState, Diagnostic, FileBucket, FileEntry, GlobEntry, LabelEntry
from .source_info import SourceInfo

__all__ = [
    "AnalysisCancelled",
    "AnalysisState",
    "Diagnostic",
    "FileBucket",
    "FileEntry",
    "GlobEntry",
    "LabelEntry",
    "NotAnalyzedError",
    "SourceInfo",
    "SourceLayoutError",
]
