"""File-type dispatch and per-class factories.

A ``FileSystem`` owns the mapping from the type reported by the OS to a
wrapper class, and one factory per wrapper class. Factories default to
calling the class with the path; ``set_factory`` swaps one in, e.g. for
dependency injection or test doubles.
"""
from typing import Any, Callable, Dict, Optional, Type

from filehandles.core.config import settings
from filehandles.core.exceptions import FileTypeUnresolvedError, UnsupportedFileTypeError
from filehandles.core.path import Path
from filehandles.core.types import FileType, PathLike
from filehandles.files.directory import Directory
from filehandles.files.file import File
from filehandles.files.link import Link
from filehandles.files.regular_file import RegularFile
from filehandles.files.socket import Socket
from filehandles.files.special import CharacterDevice, Fifo
from filehandles.infrastructure.logging import get_logger

Factory = Callable[[Path], File]

DEFAULT_FILE_CLASSES: Dict[FileType, Type[File]] = {
    FileType.FIFO: Fifo,
    FileType.CHARACTER_DEVICE: CharacterDevice,
    FileType.DIRECTORY: Directory,
    FileType.REGULAR_FILE: RegularFile,
    FileType.LINK: Link,
    FileType.SOCKET: Socket,
}


class FileSystem:
    """Builds File wrappers for paths"""

    def __init__(
        self,
        file_classes: Optional[Dict[FileType, Type[File]]] = None,
        logger: Optional[Any] = None,
    ):
        self.file_classes = dict(DEFAULT_FILE_CLASSES if file_classes is None else file_classes)
        self.logger = logger
        self._factories: Dict[Type[File], Factory] = {}

    def class_for(self, file_type: FileType) -> Type[File]:
        """Wrapper class for ``file_type``; unsupported types are fatal."""
        try:
            return self.file_classes[file_type]
        except KeyError:
            raise UnsupportedFileTypeError(file_type.value)

    def set_factory(self, cls: Type[File], factory: Factory) -> None:
        self._factories[cls] = factory

    def get_factory(self, cls: Type[File]) -> Factory:
        """Factory for ``cls``, creating and remembering the default on first use."""
        factory = self._factories.get(cls)
        if factory is None:
            factory = self._factories[cls] = self.default_factory(cls)
        return factory

    def reset_factories(self) -> None:
        self._factories.clear()

    def default_factory(self, cls: Type[File]) -> Factory:
        if cls is File:
            return self._dispatch
        return cls

    def _dispatch(self, path: Path) -> File:
        file_type = FileType.of(path.path)
        if file_type is None:
            raise FileTypeUnresolvedError(path.path)
        return self.make(path, self.class_for(file_type))

    def make(self, path: PathLike, cls: Type[File] = File) -> File:
        path = Path.of(path)
        file = self.get_factory(cls)(path)
        if self.logger is not None and file.get_logger() is None:
            file.set_logger(self.logger)
        return file


_filesystem: Optional[FileSystem] = None


def get_filesystem() -> FileSystem:
    global _filesystem
    if _filesystem is None:
        _filesystem = FileSystem(logger=get_logger("filehandles") if settings.logging_enabled else None)
    return _filesystem


def set_filesystem(filesystem: Optional[FileSystem]) -> None:
    global _filesystem
    _filesystem = filesystem
