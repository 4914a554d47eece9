"""Tests for the in-memory virtual filesystem.

WHY: Every other test runs conversions on top of InMemoryFileSystem, and
the lifecycle relies on its FileExistsError to recognize directories that
already exist. Its error behavior has to match the engine's filesystem.
"""

from __future__ import annotations

import pytest

from x2t_bridge.engine.memory import InMemoryFileSystem


@pytest.fixture
def fs() -> InMemoryFileSystem:
    fs = InMemoryFileSystem()
    fs.mkdir("/working")
    return fs


class TestDirectories:

    def test_mkdir_existing_raises_file_exists(self, fs):
        with pytest.raises(FileExistsError):
            fs.mkdir("/working")

    def test_mkdir_without_parent_raises(self, fs):
        with pytest.raises(FileNotFoundError):
            fs.mkdir("/missing/child")

    def test_mkdir_trailing_slash_is_ignored(self, fs):
        fs.mkdir("/working/media/")
        assert fs.exists("/working/media")

    def test_readdir_lists_pseudo_entries_then_sorted_children(self, fs):
        fs.mkdir("/working/media")
        fs.write_file("/working/b.docx", b"b")
        fs.write_file("/working/a.docx", b"a")
        fs.write_file("/working/media/image1.png", b"i")
        assert fs.readdir("/working/") == [".", "..", "a.docx", "b.docx", "media"]

    def test_readdir_missing_raises(self, fs):
        with pytest.raises(FileNotFoundError):
            fs.readdir("/working/media")

    def test_readdir_on_file_raises(self, fs):
        fs.write_file("/working/a.docx", b"a")
        with pytest.raises(NotADirectoryError):
            fs.readdir("/working/a.docx")


class TestFiles:

    def test_unlink_removes_file(self, fs):
        fs.write_file("/working/a.docx", b"a")
        fs.unlink("/working/a.docx")
        assert not fs.exists("/working/a.docx")
        assert fs.readdir("/working") == [".", ".."]

    def test_unlink_missing_raises(self, fs):
        with pytest.raises(FileNotFoundError):
            fs.unlink("/working/a.docx")

    def test_unlink_directory_raises(self, fs):
        with pytest.raises(IsADirectoryError):
            fs.unlink("/working")

    def test_write_then_read(self, fs):
        fs.write_file("/working/a.docx", b"\x00\x01payload")
        assert fs.read_file("/working/a.docx") == b"\x00\x01payload"

    def test_write_str_is_utf8_encoded(self, fs):
        fs.write_file("/working/params.xml", "<a>ü</a>")
        assert fs.read_file("/working/params.xml") == "<a>ü</a>".encode("utf-8")

    def test_write_replaces_content(self, fs):
        fs.write_file("/working/params.xml", "a much longer first document")
        fs.write_file("/working/params.xml", "short")
        assert fs.read_file("/working/params.xml") == b"short"

    def test_write_without_parent_raises(self, fs):
        with pytest.raises(FileNotFoundError):
            fs.write_file("/working/media/image1.png", b"i")

    def test_read_missing_raises(self, fs):
        with pytest.raises(FileNotFoundError):
            fs.read_file("/working/nope.bin")

    def test_read_directory_raises(self, fs):
        with pytest.raises(IsADirectoryError):
            fs.read_file("/working")

    def test_exists(self, fs):
        assert fs.exists("/working")
        assert not fs.exists("/working/a.docx")
        fs.write_file("/working/a.docx", b"a")
        assert fs.exists("/working/a.docx")
