from contextlib import contextmanager
from typing import Callable, ClassVar, Iterator, Optional, TypeVar, Union

from filehandles.core.config import settings
from filehandles.core.types import FileType, Lock
from filehandles.files.file import File
from filehandles.handles.regular_file import RegularFileHandle

T = TypeVar("T")


class RegularFile(File):
    """Regular file whose content access runs inside a locked transaction."""

    FILE_TYPE: ClassVar[FileType] = FileType.REGULAR_FILE

    def open(self, mode: str = "r") -> RegularFileHandle:
        self._info("opening_file", "open", path=self.path.path, mode=mode)
        handle = RegularFileHandle(self.path, mode, logger=self._logger)
        self._debug("file_opened", "open", path=self.path.path, mode=mode)
        return handle

    @contextmanager
    def locked(self, mode: str = "r", lock: Optional[Union[Lock, str]] = None) -> Iterator[RegularFileHandle]:
        """Open a handle, lock it, and always unlock and close it on exit.

        ``lock`` defaults to the configured transaction lock (exclusive).
        """
        handle = self.open(mode)
        try:
            handle.lock(lock or settings.transaction_lock)
            yield handle
        finally:
            handle.unlock(close=True)

    def transaction(
        self,
        work: Callable[[RegularFileHandle], T],
        mode: str = "r",
        lock: Optional[Union[Lock, str]] = None,
    ) -> T:
        with self.locked(mode, lock) as handle:
            return work(handle)

    def get_content(self) -> Optional[bytes]:
        self._info("reading_content", "get_content", path=self.path.path)

        content = self.transaction(lambda handle: handle.get_content(), "r", Lock.SHARED)

        self._debug("content_read", "get_content", path=self.path.path,
                    length=None if content is None else len(content))
        return content

    def set_content(self, content: Union[bytes, str]) -> int:
        self._info("writing_content", "set_content", path=self.path.path, length=len(content))

        written = self.transaction(lambda handle: handle.set_content(content), "c")

        self._debug("content_written", "set_content", path=self.path.path,
                    length=len(content), written=written)
        return written

    @property
    def content(self) -> Optional[bytes]:
        return self.get_content()

    @content.setter
    def content(self, content: Union[bytes, str]) -> None:
        self.set_content(content)
