"""Common type definitions for filehandles"""

import os
import stat
from enum import Enum
from typing import Optional, Union

# Type aliases
PathLike = Union[str, "os.PathLike[str]"]


class Lock(str, Enum):
    """Advisory lock kinds understood by flock()"""
    SHARED = "shared"
    EXCLUSIVE = "exclusive"


class FileType(str, Enum):
    """File types as reported by lstat()"""
    FIFO = "fifo"
    CHARACTER_DEVICE = "char"
    DIRECTORY = "dir"
    BLOCK_DEVICE = "block"
    REGULAR_FILE = "file"
    LINK = "link"
    SOCKET = "socket"

    @classmethod
    def from_mode(cls, mode: int) -> Optional["FileType"]:
        if stat.S_ISLNK(mode):
            return cls.LINK
        if stat.S_ISREG(mode):
            return cls.REGULAR_FILE
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISFIFO(mode):
            return cls.FIFO
        if stat.S_ISCHR(mode):
            return cls.CHARACTER_DEVICE
        if stat.S_ISBLK(mode):
            return cls.BLOCK_DEVICE
        if stat.S_ISSOCK(mode):
            return cls.SOCKET
        return None

    @classmethod
    def of(cls, path: PathLike) -> Optional["FileType"]:
        """Type of whatever sits at path, without following a final symlink.

        Returns None when nothing exists at path or lstat() fails on it.
        """
        try:
            mode = os.lstat(path).st_mode
        except OSError:
            return None
        return cls.from_mode(mode)
