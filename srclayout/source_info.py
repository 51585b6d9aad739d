"""Source-root inference for the declared sources of one build target."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .config import AnalysisConfig
from .errors import NotAnalyzedError
from .filesystem import CancellationToken, LocalFileSystem, SourceFileSystem, has_extension
from .grouping import GroupingResult, group_source_roots
from .logging import get_logger, log_diagnostic
from .models import (
    WARNING,
    AnalysisState,
    Diagnostic,
    FileBucket,
    FileEntry,
    GlobEntry,
    RootContents,
    SourceEntry,
)
from .package_detector import PackagePathDetector
from .sharing import SharedSourceFilter
from .split_packages import SplitFinding, find_deep_splits, find_shallow_splits

RootKey = Union[str, PurePosixPath]


@dataclass(frozen=True)
class _AnalysisResult:
    state: AnalysisState
    source_directories: Mapping[PurePosixPath, RootContents]
    without_common_root: Tuple[FileEntry, ...]
    split_roots: Tuple[PurePosixPath, ...]
    diagnostics: Tuple[Diagnostic, ...]


class SourceInfo:
    """Analyzes a target's ``srcs`` to identify source roots or split packages.

    The result is either a map of source directories (relative to
    ``base_location``) to their files or glob, or, when any root is irregular,
    a fallback list holding every declared file individually.
    """

    def __init__(
        self,
        srcs: Iterable[SourceEntry],
        base_location: Path,
        shared_source_info: Optional["SourceInfo"] = None,
        *,
        settings: AnalysisConfig | None = None,
        filesystem: SourceFileSystem | None = None,
    ) -> None:
        self._srcs: Tuple[SourceEntry, ...] = tuple(srcs)
        self.base_location = Path(base_location)
        self._shared_source_info = shared_source_info
        self.settings = settings or AnalysisConfig()
        self._filesystem = filesystem or LocalFileSystem(
            follow_symlinks=self.settings.follow_symlinks
        )
        self._detector = PackagePathDetector(self._filesystem, encoding=self.settings.encoding)
        self._is_source_file = has_extension(tuple(self.settings.source_extensions))
        self.logger = get_logger("source_info")
        self._result: Optional[_AnalysisResult] = None

    @property
    def shared_source_info(self) -> Optional["SourceInfo"]:
        return self._shared_source_info

    @property
    def state(self) -> AnalysisState:
        return self._result.state if self._result is not None else AnalysisState.UNANALYZED

    def analyze(self, cancel: CancellationToken | None = None) -> List[Diagnostic]:
        """Run the analysis pass and publish its results.

        Returns the collected diagnostics. Raises
        :class:`~srclayout.errors.SourceLayoutError` when a candidate root
        cannot be listed and :class:`~srclayout.errors.AnalysisCancelled` when
        ``cancel`` is set during a recursive search; nothing is published in
        either case.
        """
        self.logger.debug(
            "Analyzing %d source entries in %s", len(self._srcs), self.base_location
        )
        grouping = group_source_roots(self._srcs, self._detector)
        diagnostics = list(grouping.diagnostics)

        shared_filter = SharedSourceFilter(self.base_location, self._shared_source_info)
        findings = self._find_split_packages(grouping, shared_filter, cancel)
        diagnostics.extend(
            Diagnostic(severity=WARNING, message=finding.describe(), path=str(finding.directory))
            for finding in findings
        )

        split_roots: List[PurePosixPath] = []
        for finding in findings:
            if finding.root not in split_roots:
                split_roots.append(finding.root)
        if shared_filter.active:
            split_roots = [root for root in split_roots if not shared_filter.covers(root)]

        if not split_roots:
            state = AnalysisState.CONSISTENT
            directories = self._group_directories(grouping)
            without_common_root = tuple(grouping.non_conforming)
        else:
            # one irregular root invalidates directory grouping for the whole target
            state = AnalysisState.FALLBACK
            directories = MappingProxyType({})
            without_common_root = tuple(
                entry for entry in self._srcs if isinstance(entry, FileEntry)
            )
        self._result = _AnalysisResult(
            state=state,
            source_directories=directories,
            without_common_root=without_common_root,
            split_roots=tuple(split_roots),
            diagnostics=tuple(diagnostics),
        )

        for diagnostic in diagnostics:
            log_diagnostic(self.logger, diagnostic)
        self.logger.debug(
            "Analysis of %s finished as %s with %d source directories",
            self.base_location,
            state.value,
            len(directories),
        )
        return list(diagnostics)

    def _find_split_packages(
        self,
        grouping: GroupingResult,
        shared_filter: SharedSourceFilter,
        cancel: CancellationToken | None,
    ) -> List[SplitFinding]:
        shallow = find_shallow_splits(
            grouping,
            base_location=self.base_location,
            filesystem=self._filesystem,
            is_source_file=self._is_source_file,
            is_covered=shared_filter.covers,
        )
        deep = find_deep_splits(
            grouping,
            base_location=self.base_location,
            filesystem=self._filesystem,
            is_source_file=self._is_source_file,
            is_covered=shared_filter.covers,
            already_split={finding.root for finding in shallow},
            cancel=cancel,
        )
        return shallow + deep

    @staticmethod
    def _group_directories(grouping: GroupingResult) -> Mapping[PurePosixPath, RootContents]:
        roots: Dict[PurePosixPath, RootContents] = {}
        for root, value in grouping.roots.items():
            if isinstance(value, GlobEntry):
                roots[root] = value
            else:
                roots[root] = FileBucket(tuple(value))
        return MappingProxyType(roots)

    # ------------------------------------------------------------------
    # Read accessors

    @property
    def is_analyzed(self) -> bool:
        return self._result is not None

    @property
    def is_fallback(self) -> bool:
        return self._require_analyzed().state is AnalysisState.FALLBACK

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self._require_analyzed().diagnostics

    @property
    def split_roots(self) -> Tuple[PurePosixPath, ...]:
        return self._require_analyzed().split_roots

    @property
    def source_directory_map(self) -> Mapping[PurePosixPath, RootContents]:
        return self._require_analyzed().source_directories

    @property
    def source_directories(self) -> Tuple[PurePosixPath, ...]:
        """Detected source directories, relative to :attr:`base_location`."""
        return tuple(self.source_directory_map)

    def has_source_directories(self) -> bool:
        return self._result is not None and bool(self._result.source_directories)

    @property
    def source_files_without_common_root(self) -> Tuple[FileEntry, ...]:
        return self._require_analyzed().without_common_root

    def has_source_files_without_common_root(self) -> bool:
        return self._result is not None and bool(self._result.without_common_root)

    def contents_for(self, source_directory: RootKey) -> RootContents:
        root = PurePosixPath(source_directory)
        try:
            return self.source_directory_map[root]
        except KeyError:
            raise KeyError(f"source directory '{root}' unknown") from None

    def files_for(self, source_directory: RootKey) -> Tuple[FileEntry, ...]:
        contents = self.contents_for(source_directory)
        if isinstance(contents, FileBucket):
            return contents.files
        return ()

    def detected_packages(self) -> List[PurePosixPath]:
        """Distinct package paths of all file-backed source directories."""
        packages: List[PurePosixPath] = []
        for root in self.source_directories:
            for package in self.detected_packages_for(root):
                if package not in packages:
                    packages.append(package)
        return packages

    def detected_packages_for(self, source_directory: RootKey) -> List[PurePosixPath]:
        """Distinct package paths of one source directory; globs carry none."""
        packages: List[PurePosixPath] = []
        for entry in self.files_for(source_directory):
            package = entry.detected_package_path
            if package is not None and package not in packages:
                packages.append(package)
        return packages

    def inclusion_patterns_for(self, source_directory: RootKey) -> Optional[Tuple[str, ...]]:
        """Include patterns of a glob-backed directory; ``None`` includes everything."""
        contents = self.contents_for(source_directory)
        if isinstance(contents, GlobEntry):
            return contents.include
        return None

    def exclusion_patterns_for(self, source_directory: RootKey) -> Optional[Tuple[str, ...]]:
        """Exclude patterns of a glob-backed directory; ``None`` excludes nothing."""
        contents = self.contents_for(source_directory)
        if isinstance(contents, GlobEntry):
            return contents.exclude
        return None

    def _require_analyzed(self) -> _AnalysisResult:
        if self._result is None:
            raise NotAnalyzedError(
                f"Sources in '{self.base_location}' have not been analyzed yet"
            )
        return self._result


__all__ = ["SourceInfo"]
