"""Tests for source discovery and loading."""

from pathlib import Path

import pytest

from cpdscan.core.sources import SourceUnit, discover_sources, load_source
from cpdscan.error.exceptions import SourceLoadError


@pytest.fixture
def source_tree(tmp_path):
    """Create a small tree of source files."""
    (tmp_path / "pkg" / "sub").mkdir(parents=True)
    (tmp_path / "pkg" / "B.java").write_text("class B {}\n")
    (tmp_path / "pkg" / "A.java").write_text("class A {}\n")
    (tmp_path / "pkg" / "notes.txt").write_text("not code\n")
    (tmp_path / "pkg" / "sub" / "C.java").write_text("class C {}\n")
    return tmp_path


class TestSourceUnit:
    """Test SourceUnit creation."""

    def test_from_text(self):
        """Test name and length of an in-memory unit."""
        unit = SourceUnit.from_text("src/Main.java", "class Main {}")
        assert unit.name == "Main.java"
        assert unit.content_length == 13

    def test_bom_is_stripped(self):
        """Test that a leading byte order mark is removed."""
        unit = SourceUnit.from_text("a.java", "\ufeffclass A {}")
        assert unit.text == "class A {}"

    def test_lines_split_on_newline_only(self):
        """Test that form feeds and other separators do not start a line."""
        unit = SourceUnit.from_text("a.c", "int a;\f\nint b;\x1c\u2028\r\nint c;")
        assert unit.lines == ["int a;\f", "int b;\x1c\u2028", "int c;"]


class TestLoadSource:
    """Test loading files."""

    def test_load(self, tmp_path):
        """Test reading and decoding a file."""
        path = tmp_path / "A.java"
        path.write_bytes("\ufeffclass A {}\n".encode("utf-8"))

        unit = load_source(path)

        assert unit.source_id == str(path)
        assert unit.name == "A.java"
        assert unit.text == "class A {}\n"

    def test_encoding(self, tmp_path):
        """Test decoding with a non-default encoding."""
        path = tmp_path / "A.java"
        path.write_bytes("String s = \"caf\xe9\";".encode("latin-1"))

        unit = load_source(path, encoding="latin-1")

        assert "café" in unit.text

    def test_undecodable(self, tmp_path):
        """Test SourceLoadError for bytes invalid in the encoding."""
        path = tmp_path / "A.java"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(SourceLoadError) as exc_info:
            load_source(path, encoding="utf-8")
        assert exc_info.value.source_id == str(path)
        assert exc_info.value.code == "LOAD_FAILED"

    def test_missing_file(self, tmp_path):
        """Test SourceLoadError for an unreadable path."""
        with pytest.raises(SourceLoadError):
            load_source(tmp_path / "missing.java")


class TestDiscoverSources:
    """Test file discovery."""

    def test_recursive_with_extensions(self, source_tree):
        """Test that directories are walked and filtered by extension."""
        found = discover_sources([source_tree / "pkg"], extensions=[".java"])
        assert [p.name for p in found] == ["A.java", "B.java", "C.java"]

    def test_non_recursive(self, source_tree):
        """Test that subdirectories are skipped when not recursive."""
        found = discover_sources([source_tree / "pkg"], extensions=[".java"], recursive=False)
        assert [p.name for p in found] == ["A.java", "B.java"]

    def test_no_extension_filter(self, source_tree):
        """Test that all files are accepted without an extension list."""
        found = discover_sources([source_tree / "pkg"], recursive=False)
        assert {p.name for p in found} == {"A.java", "B.java", "notes.txt"}

    def test_explicit_file_always_kept(self, source_tree):
        """Test that a named file bypasses the extension filter."""
        found = discover_sources([source_tree / "pkg" / "notes.txt"], extensions=[".java"])
        assert [p.name for p in found] == ["notes.txt"]

    def test_excludes(self, source_tree):
        """Test excluding a file and a directory."""
        found = discover_sources(
            [source_tree / "pkg"],
            extensions=[".java"],
            excludes=[source_tree / "pkg" / "A.java", source_tree / "pkg" / "sub"],
        )
        assert [p.name for p in found] == ["B.java"]

    def test_duplicates_collapsed(self, source_tree):
        """Test that a file reached twice is listed once."""
        pkg = source_tree / "pkg"
        found = discover_sources([pkg, pkg / "A.java"], extensions=[".java"])
        assert len(found) == 3

    def test_missing_path(self, tmp_path):
        """Test FileNotFoundError for a path that does not exist."""
        with pytest.raises(FileNotFoundError):
            discover_sources([Path(tmp_path / "nowhere")])
