"""Regular files holding codec-encoded records."""
from typing import Any, Callable, Iterable, List, Optional

from filehandles.codecs import Codec
from filehandles.core.types import PathLike
from filehandles.files.regular_file import RegularFile
from filehandles.handles.regular_file import RegularFileHandle

NEWLINE = b"\n"


class EncodedFile(RegularFile):
    """The whole file is one encoded record."""

    def __init__(self, path: PathLike, codec: Codec, logger: Optional[Any] = None):
        super().__init__(path, logger=logger)
        self.codec = codec

    def get_data(self) -> Any:
        content = self.get_content()
        return None if content is None else self.codec.decode(content)

    def set_data(self, data: Any) -> int:
        return self.set_content(self.codec.encode(data))

    @property
    def data(self) -> Any:
        return self.get_data()

    @data.setter
    def data(self, data: Any) -> None:
        self.set_data(data)


class LineEncodedFile(RegularFile):
    """One encoded record per line."""

    def __init__(self, path: PathLike, codec: Codec, logger: Optional[Any] = None):
        super().__init__(path, logger=logger)
        self.codec = codec

    def _decode_line(self, line: bytes) -> Any:
        return self.codec.decode(line.rstrip(NEWLINE))

    def get_data(self) -> List[Any]:
        self._info("reading_records", "get_data", path=self.path.path)

        def work(handle: RegularFileHandle) -> List[Any]:
            records = []
            while (line := handle.readline()) is not None:
                records.append(self._decode_line(line))
            return records

        records = self.transaction(work, "r")

        self._debug("records_read", "get_data", path=self.path.path, count=len(records))
        return records

    def set_data(self, data: Iterable[Any]) -> int:
        """Replace the file with ``data``; returns bytes written."""
        self._info("writing_records", "set_data", path=self.path.path,
                   count=len(data) if isinstance(data, (list, tuple)) else None)

        count = 0

        def work(handle: RegularFileHandle) -> int:
            nonlocal count
            written = 0
            for record in data:
                written += handle.write(self.codec.encode(record) + NEWLINE)
                count += 1
            handle.truncate()
            return written

        written = self.transaction(work, "c")

        self._debug("records_written", "set_data", path=self.path.path,
                    actual_count=count, written=written)
        return written

    @property
    def data(self) -> List[Any]:
        return self.get_data()

    @data.setter
    def data(self, data: Iterable[Any]) -> None:
        self.set_data(data)

    def append(self, record: Any) -> int:
        self._info("appending_record", "append", path=self.path.path)

        written = self.transaction(lambda handle: handle.writeline(self.codec.encode(record)), "a")

        self._debug("record_appended", "append", path=self.path.path, written=written)
        return written

    def foreach_record(
        self,
        callback: Callable[[Any, RegularFileHandle], Optional[bool]],
        start_position: int = 0,
    ) -> int:
        """Call ``callback(record, handle)`` for each record from ``start_position``.

        Iteration stops early when the callback returns False. Returns the
        offset just past the last record read, usable as the next start.
        """
        def work(handle: RegularFileHandle) -> int:
            if start_position > 0:
                handle.position = start_position

            while (line := handle.readline()) is not None:
                if callback(self._decode_line(line), handle) is False:
                    break

            return handle.position

        return self.transaction(work, "r")
