"""Pytest configuration and fixtures"""

import fcntl
import os
from pathlib import Path
from typing import Generator

import pytest

from filehandles.files import Directory, FileSystem, LockableDirectory, RegularFile, set_filesystem


@pytest.fixture(autouse=True)
def isolated_filesystem() -> Generator[FileSystem, None, None]:
    """Give every test its own default FileSystem so factories never leak"""
    filesystem = FileSystem()
    set_filesystem(filesystem)
    yield filesystem
    set_filesystem(None)


@pytest.fixture
def regular_file(tmp_path: Path) -> RegularFile:
    """A regular file holding a short text"""
    path = tmp_path / "data.txt"
    path.write_bytes(b"hello\nworld\n")
    return RegularFile(path)


@pytest.fixture
def directory(tmp_path: Path) -> Directory:
    """A directory with a few files and one subdirectory"""
    root = tmp_path / "tree"
    root.mkdir()
    for name in ("a.txt", "b.txt", "c.bin"):
        (root / name).write_text(name)
    (root / "nested").mkdir()
    (root / "nested" / "inner.txt").write_text("inner")
    return Directory(root)


@pytest.fixture
def lockable_directory(tmp_path: Path) -> LockableDirectory:
    root = tmp_path / "locked"
    root.mkdir()
    (root / "one").write_text("1")
    (root / "two").write_text("2")
    return LockableDirectory(root)


def try_flock(path, operation: int = fcntl.LOCK_EX) -> bool:
    """Attempt a non-blocking flock() through a separate open file description"""
    fd = os.open(os.fspath(path), os.O_RDONLY)
    try:
        fcntl.flock(fd, operation | fcntl.LOCK_NB)
    except BlockingIOError:
        return False
    else:
        fcntl.flock(fd, fcntl.LOCK_UN)
        return True
    finally:
        os.close(fd)


@pytest.fixture
def flock_probe():
    """Callable reporting whether another opener could take a lock right now"""
    return try_flock
