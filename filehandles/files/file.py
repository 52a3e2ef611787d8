"""Base wrapper around one filesystem path."""
import grp
import os
import pwd
import shutil
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional, Union

from filehandles.core.path import Path
from filehandles.core.stat import Stat
from filehandles.core.types import FileType, PathLike
from filehandles.handles.base import Handle
from filehandles.infrastructure.logging import EmitsLogs

if TYPE_CHECKING:
    from filehandles.files.registry import FileSystem

UserOrGroup = Union[str, int]


def resolve_uid(user: UserOrGroup) -> int:
    return user if isinstance(user, int) else pwd.getpwnam(user).pw_uid


def resolve_gid(group: UserOrGroup) -> int:
    return group if isinstance(group, int) else grp.getgrnam(group).gr_gid


class File(EmitsLogs, ABC):
    """A path plus the operations the OS offers on it.

    Nothing time-varying is cached: every getter asks the OS again.
    Getters return None and mutators return False when the OS call fails.
    """

    FILE_TYPE: ClassVar[FileType] = FileType.REGULAR_FILE

    def __init__(self, path: PathLike, logger: Optional[Any] = None):
        self.path = Path.of(path)
        self._logger = logger

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.path.path!r}>"

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.path == self.path

    def __hash__(self) -> int:
        return hash((type(self), self.path))

    def __fspath__(self) -> str:
        return self.path.path

    # Factory

    @classmethod
    def make(cls, path: PathLike, filesystem: Optional["FileSystem"] = None) -> "File":
        """Build the wrapper for ``path``.

        On ``File`` itself this dispatches on the type found on disk; on a
        concrete subclass it builds that subclass without checking.
        """
        from filehandles.files.registry import get_filesystem

        return (filesystem or get_filesystem()).make(path, cls)

    @classmethod
    def set_factory(cls, factory: Callable[[Path], "File"], filesystem: Optional["FileSystem"] = None) -> None:
        from filehandles.files.registry import get_filesystem

        (filesystem or get_filesystem()).set_factory(cls, factory)

    @classmethod
    def get_factory(cls, filesystem: Optional["FileSystem"] = None) -> Callable[[Path], "File"]:
        from filehandles.files.registry import get_filesystem

        return (filesystem or get_filesystem()).get_factory(cls)

    # Helpers

    def _attempt(self, operation: str, event: str, call: Callable[[], Any], **details: Any) -> bool:
        self._info(event, operation, path=self.path.path, **details)
        try:
            call()
        except OSError as e:
            self._warning(f"{event}_failed", operation, path=self.path.path, error=str(e), **details)
            return False
        self._debug(f"{event}_done", operation, path=self.path.path, **details)
        return True

    def _stat_field(self, operation: str, field: str) -> Optional[int]:
        self._info(f"getting_{field}", operation, path=self.path.path)
        try:
            value = getattr(Stat.of_path(self.path.path), field)
        except OSError as e:
            self._warning(f"getting_{field}_failed", operation, path=self.path.path, error=str(e))
            return None
        self._debug(f"got_{field}", operation, path=self.path.path, **{field: value})
        return value

    # Ownership

    def get_group(self) -> Optional[int]:
        return self._stat_field("get_group", "gid")

    def chgrp(self, group: UserOrGroup) -> bool:
        return self._attempt(
            "chgrp", "changing_group",
            lambda: os.chown(self.path.path, -1, resolve_gid(group)),
            group=group,
        )

    def get_owner(self) -> Optional[int]:
        return self._stat_field("get_owner", "uid")

    def chown(self, user: UserOrGroup) -> bool:
        return self._attempt(
            "chown", "changing_owner",
            lambda: os.chown(self.path.path, resolve_uid(user), -1),
            user=user,
        )

    # Permissions

    def get_permissions(self) -> Optional[int]:
        """Full st_mode, file type bits included."""
        return self._stat_field("get_permissions", "mode")

    def get_mode(self) -> Optional[int]:
        """Permission bits only (including setuid, setgid and sticky)."""
        permissions = self.get_permissions()
        if permissions is None:
            return None
        return permissions & 0o7777

    def chmod(self, mode: int) -> bool:
        return self._attempt("chmod", "changing_mode", lambda: os.chmod(self.path.path, mode), mode=oct(mode))

    # Times

    def get_access_time(self) -> Optional[int]:
        return self._stat_field("get_access_time", "atime")

    def set_access_time(self, atime: Optional[int]) -> bool:
        """Set atime, keeping the current mtime."""
        return self.touch(self.get_modification_time(), atime)

    def get_change_time(self) -> Optional[int]:
        return self._stat_field("get_change_time", "ctime")

    def get_modification_time(self) -> Optional[int]:
        return self._stat_field("get_modification_time", "mtime")

    def set_modification_time(self, mtime: Optional[int]) -> bool:
        """Set mtime, keeping the current atime."""
        return self.touch(mtime, self.get_access_time())

    def touch(self, mtime: Optional[int] = None, atime: Optional[int] = None) -> bool:
        """Create the file if missing and set its times.

        ``mtime`` defaults to now and ``atime`` defaults to ``mtime``.
        """
        if mtime is None:
            mtime = int(time.time())
        if atime is None:
            atime = mtime

        def call() -> None:
            if not os.path.lexists(self.path.path):
                with open(self.path.path, "ab"):
                    pass
            os.utime(self.path.path, (atime, mtime))

        return self._attempt("touch", "touching_file", call, mtime=mtime, atime=atime)

    # Other metadata

    def get_inode(self) -> Optional[int]:
        return self._stat_field("get_inode", "inode")

    def get_size(self) -> Optional[int]:
        return self._stat_field("get_size", "size")

    def get_type(self) -> Optional[FileType]:
        self._info("getting_type", "get_type", path=self.path.path)
        file_type = FileType.of(self.path.path)
        self._debug("got_type", "get_type", path=self.path.path,
                    type=file_type.value if file_type else None)
        return file_type

    def get_stat(self) -> Optional[Stat]:
        """Snapshot of stat(), or lstat() when the path is a symlink."""
        self._info("getting_stat", "get_stat", path=self.path.path)

        file_type = FileType.of(self.path.path)
        if file_type is None:
            self._debug("got_stat", "get_stat", path=self.path.path, stat=None)
            return None

        try:
            stat = Stat.of_path(self.path.path, follow_symlinks=file_type is not FileType.LINK)
        except OSError as e:
            self._warning("getting_stat_failed", "get_stat", path=self.path.path, error=str(e))
            return None

        self._debug("got_stat", "get_stat", path=self.path.path, stat=stat.to_dict())
        return stat

    def exists(self) -> bool:
        return self.path.exists()

    # Lifecycle

    def copy(self, target: PathLike) -> bool:
        return self._attempt(
            "copy", "copying_file",
            lambda: shutil.copyfile(self.path.path, os.fspath(target)),
            target=os.fspath(target),
        )

    def link(self, target: PathLike) -> bool:
        """Create a hard link at ``target`` pointing to this file."""
        return self._attempt(
            "link", "creating_hard_link",
            lambda: os.link(self.path.path, os.fspath(target)),
            target=os.fspath(target),
        )

    def symlink(self, target: PathLike) -> bool:
        """Create a symbolic link at ``target`` pointing to this file."""
        return self._attempt(
            "symlink", "creating_symbolic_link",
            lambda: os.symlink(self.path.path, os.fspath(target)),
            target=os.fspath(target),
        )

    def rename(self, target: PathLike) -> bool:
        return self._attempt(
            "rename", "renaming_file",
            lambda: os.rename(self.path.path, os.fspath(target)),
            target=os.fspath(target),
        )

    def remove(self) -> bool:
        return self._attempt("remove", "removing_file", lambda: os.unlink(self.path.path))

    @abstractmethod
    def open(self, *args: Any, **kwargs: Any) -> Handle:
        """Open a handle on this file."""
