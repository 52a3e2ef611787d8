from contextlib import closing, contextmanager
from typing import Callable, Iterator, Optional, TypeVar, Union

from filehandles.core.config import settings
from filehandles.core.types import Lock
from filehandles.files.directory import SPECIAL_ENTRIES, Directory
from filehandles.files.file import File
from filehandles.files.regular_file import RegularFile
from filehandles.handles.lockable_directory import LockableDirectoryHandle

T = TypeVar("T")


class LockableDirectory(Directory):
    """Directory locked through a sentinel file it contains.

    Option arguments left as None fall back to the configured defaults
    (``.lock``, mode ``w``, remove on unlock, exclusive lock).
    """

    def open(
        self,
        lock_filename: Optional[str] = None,
        lock_file_opening_mode: Optional[str] = None,
        remove_lock_file_on_unlock: Optional[bool] = None,
    ) -> LockableDirectoryHandle:
        lock_filename = lock_filename or settings.lock_file_name
        lock_file_opening_mode = lock_file_opening_mode or settings.lock_file_opening_mode
        if remove_lock_file_on_unlock is None:
            remove_lock_file_on_unlock = settings.remove_lock_file_on_unlock

        self._info("opening_directory", "open", path=self.path.path, lock_file=lock_filename)

        handle = LockableDirectoryHandle(
            self.path,
            self.create_lock_file(lock_filename),
            lock_file_opening_mode,
            remove_lock_file_on_unlock,
            logger=self._logger,
        )

        self._debug("directory_opened", "open", path=self.path.path, lock_file=lock_filename)
        return handle

    @contextmanager
    def locked(
        self,
        lock_filename: Optional[str] = None,
        lock_file_opening_mode: Optional[str] = None,
        remove_lock_file_on_unlock: Optional[bool] = None,
        lock: Optional[Union[Lock, str]] = None,
    ) -> Iterator[LockableDirectoryHandle]:
        """Open a handle, lock it, and always unlock and close it on exit."""
        handle = self.open(lock_filename, lock_file_opening_mode, remove_lock_file_on_unlock)
        try:
            handle.lock(lock or settings.transaction_lock)
            yield handle
        finally:
            handle.unlock(close=True)

    def transaction(
        self,
        work: Callable[[LockableDirectoryHandle], T],
        lock_filename: Optional[str] = None,
        lock_file_opening_mode: Optional[str] = None,
        remove_lock_file_on_unlock: Optional[bool] = None,
        lock: Optional[Union[Lock, str]] = None,
    ) -> T:
        with self.locked(lock_filename, lock_file_opening_mode, remove_lock_file_on_unlock, lock) as handle:
            return work(handle)

    def iter_children(self, lock_filename: Optional[str] = None) -> Iterator[File]:
        """Yield every entry except ``.``, ``..`` and the sentinel, under lock.

        Entries are skipped by name: a file of your own called like the
        sentinel (``.lock`` by default) is never listed, and locking the
        directory opens it in the sentinel mode (``w`` truncates it).
        Pick another ``lock_filename`` if the directory may hold such a file.
        """
        lock_filename = lock_filename or settings.lock_file_name
        with self.locked(lock_filename) as handle:
            yield from self._children_of(handle, SPECIAL_ENTRIES + (lock_filename,))

    def foreach_child(self, callback: Callable[[File], object], lock_filename: Optional[str] = None) -> None:
        with closing(self.iter_children(lock_filename)) as children:
            for child in children:
                callback(child)

    def create_lock_file(self, lock_filename: Optional[str] = None) -> RegularFile:
        lock_file = RegularFile(self.path.append(lock_filename or settings.lock_file_name))
        lock_file.set_logger(self._logger)
        return lock_file
