"""Fifos and character devices, read and written through unbuffered handles."""
from typing import ClassVar

from filehandles.core.exceptions import UnsupportedOperationError
from filehandles.core.types import FileType, PathLike
from filehandles.files.file import File
from filehandles.handles.regular_file import RegularFileHandle


class Fifo(File):
    FILE_TYPE: ClassVar[FileType] = FileType.FIFO

    def open(self, mode: str = "r") -> RegularFileHandle:
        # Opening blocks until the other end of the pipe is opened too
        self._info("opening_fifo", "open", path=self.path.path, mode=mode)
        return RegularFileHandle(self.path, mode, logger=self._logger, buffering=0)

    def copy(self, target: PathLike) -> bool:
        raise UnsupportedOperationError(
            "Copying a fifo is not supported",
            details={"path": self.path.path},
        )


class CharacterDevice(File):
    FILE_TYPE: ClassVar[FileType] = FileType.CHARACTER_DEVICE

    def open(self, mode: str = "r") -> RegularFileHandle:
        self._info("opening_device", "open", path=self.path.path, mode=mode)
        return RegularFileHandle(self.path, mode, logger=self._logger, buffering=0)

    def copy(self, target: PathLike) -> bool:
        raise UnsupportedOperationError(
            "Copying a character device is not supported",
            details={"path": self.path.path},
        )
