import socket
from typing import ClassVar

from filehandles.core.exceptions import UnsupportedOperationError
from filehandles.core.types import FileType, PathLike
from filehandles.files.file import File
from filehandles.handles.socket import SocketHandle


class Socket(File):
    FILE_TYPE: ClassVar[FileType] = FileType.SOCKET

    def open(
        self,
        domain: int = socket.AF_UNIX,
        type: int = socket.SOCK_STREAM,
        protocol: int = 0,
    ) -> SocketHandle:
        self._info("opening_socket", "open", path=self.path.path, domain=domain, type=type)
        return SocketHandle(self.path, domain, type, protocol, logger=self._logger)

    def copy(self, target: PathLike) -> bool:
        raise UnsupportedOperationError(
            "Copying a socket file is not supported",
            details={"path": self.path.path},
        )
