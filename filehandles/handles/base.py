"""Base class for objects owning exactly one open OS resource."""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from filehandles.core.exceptions import ClosedHandleError
from filehandles.core.path import Path
from filehandles.core.stat import Stat
from filehandles.core.types import PathLike
from filehandles.infrastructure.logging import EmitsLogs


class Handle(EmitsLogs, ABC):
    """Wraps one OS resource opened in the constructor.

    ``open_handle`` runs exactly once per construction. After ``close`` any
    further use raises ``ClosedHandleError``.
    """

    def __init__(self, path: PathLike, logger: Optional[Any] = None, **options: Any):
        self._setup(path, logger, options)
        self._resource = self.open_handle()

    def _setup(self, path: PathLike, logger: Optional[Any], options: Dict[str, Any]) -> None:
        self.path = Path.of(path)
        self.options = options
        self._logger = logger
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} {self.path.path!r} {state}>"

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClosedHandleError(self.path.path)

    def close(self) -> bool:
        """Release the OS resource. Closing twice returns False."""
        if self._closed:
            return False

        self._info("closing_handle", "close", path=self.path.path)
        closed = self.close_handle()
        self._closed = True
        self._debug("handle_closed", "close", path=self.path.path, success=closed)

        return closed

    def get_stat(self) -> Optional[Stat]:
        self._ensure_open()
        self._info("getting_stat", "get_stat", path=self.path.path)
        stat = Stat.of_descriptor(self.fileno())
        self._debug("got_stat", "get_stat", path=self.path.path, stat=stat.to_dict())
        return stat

    @property
    def stat(self) -> Optional[Stat]:
        return self.get_stat()

    @abstractmethod
    def fileno(self) -> int:
        """Descriptor of the wrapped resource."""

    @abstractmethod
    def read(self, *args: Any, **kwargs: Any) -> Optional[Any]:
        """Read from the resource; None when nothing could be read."""

    @abstractmethod
    def open_handle(self) -> Any:
        """Open and return the OS resource."""

    @abstractmethod
    def close_handle(self) -> bool:
        """Close the OS resource."""
