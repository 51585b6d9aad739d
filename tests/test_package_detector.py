"""Tests for srclayout.package_detector."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from srclayout.filesystem import LocalFileSystem
from srclayout.package_detector import PackagePathDetector, package_name_to_path, read_package_name
from tests._fixtures.source_tree import SourceTreeBuilder


def test_read_package_name_simple_declaration() -> None:
    assert read_package_name("package com.acme.util;\n\npublic class Foo {}\n") == "com.acme.util"


def test_read_package_name_skips_license_header_and_annotations() -> None:
    text = """
    /*
     * Copyright (c) ACME. package not.this.one;
     */
    // package nor.this;
    @Deprecated
    package com.acme;

    import java.util.List;
    """
    assert read_package_name(text) == "com.acme"


def test_read_package_name_stops_at_import() -> None:
    text = "import java.util.List;\npackage com.late;\n"
    assert read_package_name(text) == ""


def test_read_package_name_default_package() -> None:
    assert read_package_name("public class Foo { String s = \"package x;\"; }") == ""


def test_read_package_name_degrades_on_garbage() -> None:
    assert read_package_name("\x00\x01 /* unterminated comment package a.b;") == ""
    assert read_package_name("") == ""


def test_read_package_name_without_semicolon() -> None:
    # kotlin style headers end the clause at the newline
    assert read_package_name("package com.acme\n\nimport foo.Bar\n") == "com.acme"


def test_package_name_to_path() -> None:
    assert package_name_to_path("com.acme") == PurePosixPath("com/acme")
    assert package_name_to_path("").parts == ()


def test_detector_inspects_one_file_per_directory(
    source_tree: SourceTreeBuilder, monkeypatch
) -> None:
    first = source_tree.java("src/com/acme/Foo.java", "com.acme")
    second = source_tree.java("src/com/acme/Bar.java", "com.acme")

    filesystem = LocalFileSystem()
    reads: list[Path] = []
    original = filesystem.read_text

    def _tracking_read(path: Path, encoding: str = "utf-8") -> str:
        reads.append(path)
        return original(path, encoding)

    monkeypatch.setattr(filesystem, "read_text", _tracking_read)
    detector = PackagePathDetector(filesystem)

    assert detector.detect(first) == PurePosixPath("com/acme")
    assert detector.detect(second) == PurePosixPath("com/acme")
    assert reads == [first.location]
    assert detector.cached_paths == {PurePosixPath("src/com/acme"): PurePosixPath("com/acme")}
    assert second.detected_package_path == PurePosixPath("com/acme")


def test_detector_treats_unreadable_file_as_default_package(source_tree: SourceTreeBuilder) -> None:
    missing = source_tree.entry("src/Missing.java")
    detector = PackagePathDetector(LocalFileSystem())

    assert detector.detect(missing).parts == ()


def test_detector_treats_undecodable_file_as_default_package(source_tree: SourceTreeBuilder) -> None:
    target = source_tree.path() / "src" / "Latin.java"
    target.parent.mkdir(parents=True)
    target.write_bytes(b"package caf\xe9;\n")

    detector = PackagePathDetector(LocalFileSystem(), encoding="utf-8")

    assert detector.detect(source_tree.entry("src/Latin.java")).parts == ()
