"""Directory handle locked through a sentinel file inside the directory."""
import fcntl
from typing import TYPE_CHECKING, Any, Optional

from filehandles.core.stat import Stat
from filehandles.core.types import Lock, PathLike
from filehandles.handles.directory import DirectoryHandle
from filehandles.handles.lockable import LockableHandle
from filehandles.handles.regular_file import RegularFileHandle

if TYPE_CHECKING:
    from filehandles.files.regular_file import RegularFile


class LockableDirectoryHandle(LockableHandle, DirectoryHandle):
    """Directory handle whose lock is the lock of a sentinel file.

    The sentinel handle is opened on first use only. A lock only counts once
    it is held on the file currently at the sentinel path; a lock won on a
    file that was unlinked meanwhile is dropped and taken again on the new
    one. When ``remove_lock_file_on_unlock`` is set, unlocking deletes the
    file before releasing it, provided no other holder shares the lock, and
    closes the sentinel handle so the next lock opens a fresh one.
    """

    def __init__(
        self,
        path: PathLike,
        lock_file: "RegularFile",
        lock_file_opening_mode: str = "w",
        remove_lock_file_on_unlock: bool = True,
        logger: Optional[Any] = None,
    ):
        self.lock_file = lock_file
        self._lock_file_handle: Optional[RegularFileHandle] = None
        super().__init__(
            path,
            logger=logger,
            lock_file_opening_mode=lock_file_opening_mode,
            remove_lock_file_on_unlock=remove_lock_file_on_unlock,
        )

    @property
    def lock_file_handle(self) -> RegularFileHandle:
        if self._lock_file_handle is None:
            self._lock_file_handle = self.create_lock_file_handle()
        return self._lock_file_handle

    def create_lock_file_handle(self) -> RegularFileHandle:
        self._info("opening_lock_file", "create_lock_file_handle",
                   path=self.path.path, lock_file=self.lock_file.path.path)

        handle = self.lock_file.open(self.options["lock_file_opening_mode"])
        handle.set_logger(self._logger)

        return handle

    def set_logger(self, logger: Optional[Any]) -> None:
        super().set_logger(logger)

        if self._lock_file_handle is not None:
            self._lock_file_handle.set_logger(logger)

    def do_lock(self, lock: Lock) -> None:
        while True:
            handle = self.lock_file_handle
            handle.set_lock(lock)
            if self._holds_current_lock_file(handle):
                return

            # The sentinel was removed while we waited; lock the new one instead
            self._info("lock_file_replaced", "do_lock", path=self.path.path,
                       lock_file=self.lock_file.path.path)
            self._lock_file_handle = None
            handle.close()

    def _holds_current_lock_file(self, handle: RegularFileHandle) -> bool:
        try:
            on_disk = Stat.of_path(self.lock_file.path.path)
        except FileNotFoundError:
            return False
        opened = handle.get_stat()
        return (opened.device, opened.inode) == (on_disk.device, on_disk.inode)

    def do_unlock(self) -> None:
        handle = self._lock_file_handle
        if handle is None:
            return

        if not self.options["remove_lock_file_on_unlock"]:
            handle.set_lock(None)
            return

        self._lock_file_handle = None
        try:
            # Only a sole holder may unlink, and only before letting go
            if self._try_exclusive(handle):
                self.lock_file.remove()
        finally:
            handle.close()

    @staticmethod
    def _try_exclusive(handle: RegularFileHandle) -> bool:
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return False
        return True

    def close_handle(self) -> bool:
        closed = super().close_handle()

        if self._lock_file_handle is not None:
            self._lock_file_handle.close()
            self._lock_file_handle = None

        return closed
