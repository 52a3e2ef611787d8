import fcntl
import os
from typing import Any, BinaryIO, Optional, Union

from filehandles.core.types import Lock, PathLike
from filehandles.handles.base import Handle
from filehandles.handles.lockable import LockableHandle

FLOCK_OPERATIONS = {
    Lock.SHARED: fcntl.LOCK_SH,
    Lock.EXCLUSIVE: fcntl.LOCK_EX,
}


def binary_mode(mode: str) -> str:
    """fopen()-style mode string forced to binary.

    Besides the modes open() knows, ``c`` and ``c+`` open for writing and
    create the file without truncating it, so the content can be replaced
    once a lock is held.
    """
    mode = mode.replace("t", "")
    return mode if "b" in mode else mode + "b"


def as_bytes(content: Union[bytes, bytearray, str]) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    return bytes(content)


class RegularFileHandle(LockableHandle, Handle):
    """Open file with flock()-based advisory locking."""

    _resource: BinaryIO

    def __init__(self, path: PathLike, mode: str = "r", logger: Optional[Any] = None, buffering: int = -1):
        super().__init__(path, logger=logger, mode=mode, buffering=buffering)

    def open_handle(self) -> BinaryIO:
        mode = binary_mode(self.options["mode"])
        if not mode.startswith("c"):
            return open(self.path.path, mode, buffering=self.options["buffering"])

        readable = "+" in mode
        fd = os.open(self.path.path, os.O_CREAT | (os.O_RDWR if readable else os.O_WRONLY), 0o666)
        try:
            return os.fdopen(fd, "r+b" if readable else "wb", buffering=self.options["buffering"])
        except OSError:
            os.close(fd)
            raise

    def close_handle(self) -> bool:
        self._resource.close()
        return True

    def fileno(self) -> int:
        self._ensure_open()
        return self._resource.fileno()

    def read(self, length: Optional[int] = None) -> Optional[bytes]:
        """Read up to ``length`` bytes. Nothing is read unless length > 0."""
        self._ensure_open()
        if length is None or length <= 0:
            return None

        try:
            return self._resource.read(length)
        except OSError as e:
            self._warning("read_failed", "read", path=self.path.path, error=str(e))
            return None

    def readline(self, length: Optional[int] = None) -> Optional[bytes]:
        """Read one line including its newline; None at end of file."""
        self._ensure_open()
        try:
            line = self._resource.readline(-1 if length is None else length)
        except OSError as e:
            self._warning("readline_failed", "readline", path=self.path.path, error=str(e))
            return None
        return line or None

    def write(self, content: Union[bytes, bytearray, str], length: Optional[int] = None) -> int:
        self._ensure_open()
        data = as_bytes(content)
        if length is not None:
            data = data[:length]
        return self._resource.write(data)

    def writeline(self, content: Union[bytes, bytearray, str], length: Optional[int] = None) -> int:
        """Write the first line of ``content`` followed by a newline."""
        line = as_bytes(content).split(b"\n", 1)[0] + b"\n"
        if length is not None:
            line = line[:length]
        return self.write(line)

    def flush(self) -> None:
        self._ensure_open()
        self._resource.flush()

    def truncate(self, size: Optional[int] = None) -> int:
        """Cut the file at ``size``, or at the current position."""
        self._ensure_open()
        return self._resource.truncate(size)

    def seek(self, position: int, whence: int = os.SEEK_SET) -> bool:
        self._ensure_open()
        try:
            self._resource.seek(position, whence)
        except (OSError, ValueError) as e:
            self._warning("seek_failed", "seek", path=self.path.path, position=position, error=str(e))
            return False
        return True

    def get_position(self) -> int:
        self._ensure_open()
        return self._resource.tell()

    def set_position(self, position: int):
        self.seek(position, os.SEEK_SET)
        return self

    @property
    def position(self) -> int:
        return self.get_position()

    @position.setter
    def position(self, position: int) -> None:
        self.set_position(position)

    def get_content(self) -> Optional[bytes]:
        """Whole file content; the current position is preserved."""
        self._ensure_open()
        old_position = self.get_position()
        self.set_position(0)
        try:
            return self._resource.read()
        except OSError as e:
            self._warning("read_failed", "get_content", path=self.path.path, error=str(e))
            return None
        finally:
            self.set_position(old_position)

    def set_content(self, content: Union[bytes, bytearray, str]) -> int:
        """Replace the file content from offset 0; returns bytes written."""
        self.set_position(0)
        written = self.write(content)
        self.truncate()
        return written

    @property
    def content(self) -> Optional[bytes]:
        return self.get_content()

    @content.setter
    def content(self, content: Union[bytes, bytearray, str]) -> None:
        self.set_content(content)

    def do_lock(self, lock: Lock) -> None:
        fcntl.flock(self._resource.fileno(), FLOCK_OPERATIONS[lock])

    def do_unlock(self) -> None:
        # Buffered writes must reach the file while the lock is still held
        if self._resource.writable():
            self._resource.flush()
        fcntl.flock(self._resource.fileno(), fcntl.LOCK_UN)
