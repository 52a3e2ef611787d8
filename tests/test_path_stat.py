"""Tests for path values and stat snapshots"""

import os

import pytest

from filehandles.core.path import Path
from filehandles.core.stat import Stat
from filehandles.core.types import FileType


class TestPath:
    @pytest.mark.parametrize(
        "raw, basename, dirname",
        [
            ("/var/log/syslog", "syslog", "/var/log"),
            ("/var/log/", "log", "/var"),
            ("syslog", "syslog", "."),
            ("/syslog", "syslog", "/"),
            ("/", "/", "/"),
            ("a//b", "b", "a"),
        ],
    )
    def test_basename_and_dirname(self, raw, basename, dirname):
        path = Path(raw)

        assert path.basename == basename
        assert path.dirname == dirname

    @pytest.mark.parametrize(
        "raw, filename, extension",
        [
            ("/tmp/archive.tar.gz", "archive.tar", "gz"),
            ("/tmp/README", "README", ""),
            ("/tmp/.bashrc", "", "bashrc"),
        ],
    )
    def test_filename_and_extension(self, raw, filename, extension):
        path = Path(raw)

        assert path.filename == filename
        assert path.extension == extension

    def test_parent_dir(self):
        assert Path("/a/b/c").parent_dir == Path("/a/b")

    def test_absolute_and_relative(self):
        assert Path("/etc").is_absolute()
        assert Path("etc").is_relative()

    def test_append(self):
        assert Path("/tmp/").append("x").path == "/tmp/x"
        assert Path("/tmp").append("/x").path == "/tmp/x"
        assert Path("/").append("x").path == "/x"

    def test_custom_separator(self):
        path = Path("C:\\dir\\file.txt", "\\")

        assert path.basename == "file.txt"
        assert path.dirname == "C:\\dir"

    def test_of_accepts_path_objects(self, tmp_path):
        path = Path.of(tmp_path)

        assert path.path == str(tmp_path)
        assert Path.of(path) is path
        assert os.fspath(path) == str(tmp_path)

    def test_realpath_resolves_links(self, tmp_path):
        (tmp_path / "real").write_text("x")
        os.symlink(tmp_path / "real", tmp_path / "alias")

        assert Path.of(tmp_path / "alias").realpath().path == os.path.realpath(tmp_path / "real")
        assert Path.of(tmp_path / "missing").realpath() is None

    def test_paths_are_immutable(self):
        with pytest.raises(AttributeError):
            Path("/tmp").path = "/var"


class TestStat:
    def test_snapshot_of_path(self, tmp_path):
        target = tmp_path / "file"
        target.write_bytes(b"12345")

        stat = Stat.of_path(target)

        assert stat.size == 5
        assert stat.inode == os.stat(target).st_ino
        assert stat.link_count == 1
        assert FileType.from_mode(stat.mode) is FileType.REGULAR_FILE

    def test_snapshot_does_not_refresh(self, tmp_path):
        target = tmp_path / "file"
        target.write_bytes(b"1")
        stat = Stat.of_path(target)

        target.write_bytes(b"123")

        assert stat.size == 1

    def test_lstat_of_link(self, tmp_path):
        (tmp_path / "real").write_text("x")
        os.symlink(tmp_path / "real", tmp_path / "alias")

        stat = Stat.of_path(tmp_path / "alias", follow_symlinks=False)

        assert FileType.from_mode(stat.mode) is FileType.LINK

    def test_to_dict(self, tmp_path):
        target = tmp_path / "file"
        target.write_bytes(b"")

        data = Stat.of_path(target).to_dict()

        assert data["size"] == 0
        assert set(data) >= {"device", "inode", "mode", "uid", "gid", "atime", "mtime", "ctime"}


class TestFileType:
    def test_of_missing_path(self, tmp_path):
        assert FileType.of(tmp_path / "missing") is None
        assert FileType.of(tmp_path / "missing" / "deeper") is None

    def test_of_directory(self, tmp_path):
        assert FileType.of(tmp_path) is FileType.DIRECTORY
