import os
from typing import Iterator, Optional

from filehandles.core.stat import Stat
from filehandles.handles.base import Handle


class DirectoryHandle(Handle):
    """Open directory stream yielding one entry name per ``read``."""

    _resource: Iterator[os.DirEntry]

    def open_handle(self) -> Iterator[os.DirEntry]:
        return os.scandir(self.path.path)

    def close_handle(self) -> bool:
        self._resource.close()
        return True

    def fileno(self) -> int:
        raise OSError(f"Directory stream on {self.path.path} exposes no descriptor")

    def get_stat(self) -> Optional[Stat]:
        self._ensure_open()
        self._info("getting_stat", "get_stat", path=self.path.path)
        stat = Stat.of_path(self.path.path)
        self._debug("got_stat", "get_stat", path=self.path.path, stat=stat.to_dict())
        return stat

    def read(self) -> Optional[str]:
        """Next entry name, or None once the stream is exhausted."""
        self._ensure_open()
        self._info("reading_entry", "read", path=self.path.path)

        entry = next(self._resource, None)

        if entry is None:
            self._debug("end_of_entries", "read", path=self.path.path)
            return None

        self._debug("entry_read", "read", path=self.path.path, entry=entry.name)
        return entry.name

    def __iter__(self) -> Iterator[str]:
        while (entry := self.read()) is not None:
            yield entry
