"""Immutable filesystem path value."""
import os
from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class Path:
    """A path string plus the separator used to split and join it.

    Only string manipulation happens here, apart from ``exists`` and
    ``realpath`` which ask the OS.
    """

    path: str
    separator: str = field(default=os.sep)

    @classmethod
    def of(cls, value: Union["Path", str, "os.PathLike[str]"]) -> "Path":
        if isinstance(value, cls):
            return value
        return cls(os.fspath(value))

    def __str__(self) -> str:
        return self.path

    def __fspath__(self) -> str:
        return self.path

    @property
    def basename(self) -> str:
        stripped = self.path.rstrip(self.separator)
        if not stripped:
            return self.separator if self.path else ""
        return stripped.rpartition(self.separator)[2]

    @property
    def dirname(self) -> str:
        stripped = self.path.rstrip(self.separator)
        if not stripped:
            return self.separator if self.path else "."
        head, sep, _ = stripped.rpartition(self.separator)
        if not sep:
            return "."
        return head.rstrip(self.separator) or self.separator

    @property
    def extension(self) -> str:
        name, dot, extension = self.basename.rpartition(".")
        return extension if dot else ""

    @property
    def filename(self) -> str:
        name, dot, _ = self.basename.rpartition(".")
        return name if dot else self.basename

    @property
    def parent_dir(self) -> "Path":
        return Path(self.dirname, self.separator)

    def realpath(self) -> Optional["Path"]:
        """Canonical absolute path, or None if it does not exist."""
        if not os.path.exists(self.path):
            return None
        return Path(os.path.realpath(self.path), self.separator)

    def is_absolute(self) -> bool:
        return self.path.startswith(self.separator)

    def is_relative(self) -> bool:
        return not self.is_absolute()

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def append(self, name: Union["Path", str]) -> "Path":
        return Path(
            self.path.rstrip(self.separator) + self.separator + str(name).lstrip(self.separator),
            self.separator,
        )
