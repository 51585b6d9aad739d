"""Lexical detection of the package a source file declares."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Dict, Iterator, List, Mapping, Tuple

from .filesystem import SourceFileSystem
from .logging import get_logger
from .models import FileEntry

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<comment>//[^\n]*|/\*.*?(?:\*/|\Z))
    | (?P<literal>"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')
    | (?P<ident>(?:[^\W\d]|\$)[\w$]*)
    | (?P<dot>\.)
    | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_PACKAGE = "package"
_IMPORT = "import"
_EOF = ("eof", "")

_logger = get_logger("package_detector")


def _tokenize(text: str) -> Iterator[Tuple[str, str]]:
    for match in _TOKEN_PATTERN.finditer(text):
        kind = match.lastgroup or "other"
        if kind in {"space", "comment"}:
            continue
        yield kind, match.group()
    while True:
        yield _EOF


def _is_name_segment(token: Tuple[str, str]) -> bool:
    kind, value = token
    return kind == "ident" and value not in {_PACKAGE, _IMPORT}


def read_package_name(text: str) -> str:
    """Return the dotted package name declared in ``text`` ("" when none).

    Scanning stops at the first ``import`` or at end of input, so only the
    file header is ever tokenized.
    """
    tokens = _tokenize(text)
    segments: List[str] = []
    token = next(tokens)
    while True:
        kind, value = token
        if kind == "ident" and value == _PACKAGE:
            token = next(tokens)
            while _is_name_segment(token):
                segments.append(token[1])
                token = next(tokens)
                if token[0] == "dot":
                    token = next(tokens)
            continue
        if token == _EOF or (kind == "ident" and value == _IMPORT):
            return ".".join(segments)
        token = next(tokens)


def package_name_to_path(package_name: str) -> PurePosixPath:
    return PurePosixPath(*[segment for segment in package_name.split(".") if segment])


class PackagePathDetector:
    """Detects package paths, inspecting at most one file per directory."""

    def __init__(self, filesystem: SourceFileSystem, *, encoding: str = "utf-8") -> None:
        self._filesystem = filesystem
        self._encoding = encoding
        self._by_parent: Dict[PurePosixPath, PurePosixPath] = {}

    @property
    def cached_paths(self) -> Mapping[PurePosixPath, PurePosixPath]:
        return dict(self._by_parent)

    def detect(self, entry: FileEntry) -> PurePosixPath:
        """Return the entry's package path, filling its cache slot on first use."""
        if entry.detected_package_path is None:
            entry.detected_package_path = self._package_path_for(entry)
        return entry.detected_package_path

    def _package_path_for(self, entry: FileEntry) -> PurePosixPath:
        cached = self._by_parent.get(entry.parent)
        if cached is not None:
            return cached

        package_path = package_name_to_path(self._read_package_name(entry))
        self._by_parent[entry.parent] = package_path
        _logger.debug("Detected package '%s' for directory %s", package_path, entry.parent)
        return package_path

    def _read_package_name(self, entry: FileEntry) -> str:
        try:
            text = self._filesystem.read_text(entry.location, self._encoding)
        except (OSError, UnicodeDecodeError):
            return ""
        return read_package_name(text)


__all__ = ["PackagePathDetector", "package_name_to_path", "read_package_name"]
