import socket
from typing import Any, Optional, Union

from filehandles.core.types import PathLike
from filehandles.handles.base import Handle


class SocketHandle(Handle):
    """Socket addressed by a filesystem path."""

    _resource: socket.socket

    def __init__(
        self,
        path: PathLike,
        domain: int = socket.AF_UNIX,
        type: int = socket.SOCK_STREAM,
        protocol: int = 0,
        logger: Optional[Any] = None,
    ):
        super().__init__(path, logger=logger, domain=domain, type=type, protocol=protocol)

    @classmethod
    def _adopt(cls, path: PathLike, sock: socket.socket, options: dict, logger: Optional[Any]) -> "SocketHandle":
        # Wraps an already connected socket (from accept) without opening a new one
        handle = cls.__new__(cls)
        handle._setup(path, logger, dict(options))
        handle._resource = sock
        return handle

    def open_handle(self) -> socket.socket:
        return socket.socket(self.options["domain"], self.options["type"], self.options["protocol"])

    def close_handle(self) -> bool:
        try:
            self._resource.close()
        except OSError as e:
            self._warning("socket_close_failed", "close", path=self.path.path, error=str(e))
            return False
        return True

    def fileno(self) -> int:
        self._ensure_open()
        return self._resource.fileno()

    def _call(self, operation: str, *args: Any) -> bool:
        self._ensure_open()
        self._info(f"socket_{operation}", operation, path=self.path.path)
        try:
            getattr(self._resource, operation)(*args)
        except OSError as e:
            self._warning(f"socket_{operation}_failed", operation, path=self.path.path, error=str(e))
            return False
        self._debug(f"socket_{operation}_done", operation, path=self.path.path)
        return True

    def bind(self) -> bool:
        return self._call("bind", self.path.path)

    def connect(self) -> bool:
        return self._call("connect", self.path.path)

    def listen(self, backlog: int = socket.SOMAXCONN) -> bool:
        return self._call("listen", backlog)

    def accept(self) -> Optional["SocketHandle"]:
        """Wait for a client; returns a handle on the accepted connection."""
        self._ensure_open()
        try:
            client, _ = self._resource.accept()
        except OSError as e:
            self._warning("socket_accept_failed", "accept", path=self.path.path, error=str(e))
            return None
        return self._adopt(self.path, client, self.options, self._logger)

    def read(self, length: int = 1024) -> Optional[bytes]:
        self._ensure_open()
        try:
            return self._resource.recv(length)
        except OSError as e:
            self._warning("socket_read_failed", "read", path=self.path.path, error=str(e))
            return None

    def write(self, content: Union[bytes, str], length: Optional[int] = None) -> Optional[int]:
        self._ensure_open()
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        if length is not None:
            data = data[:length]
        try:
            return self._resource.send(data)
        except OSError as e:
            self._warning("socket_write_failed", "write", path=self.path.path, error=str(e))
            return None
