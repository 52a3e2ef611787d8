import os
from contextlib import closing
from typing import Callable, ClassVar, Iterator, Optional

from filehandles.core.types import FileType
from filehandles.files.file import File
from filehandles.handles.directory import DirectoryHandle

SPECIAL_ENTRIES = (".", "..")


class Directory(File):
    FILE_TYPE: ClassVar[FileType] = FileType.DIRECTORY

    def mkdir(self, name: str, permissions: int = 0o777, recursive: bool = False) -> Optional["Directory"]:
        """Create ``name`` inside this directory; None if the OS refuses."""
        path = self.path.append(name)
        self._info("creating_directory", "mkdir", path=self.path.path, name=name,
                   permissions=oct(permissions), recursive=recursive)

        try:
            if recursive:
                os.makedirs(path.path, permissions)
            else:
                os.mkdir(path.path, permissions)
        except OSError as e:
            self._warning("creating_directory_failed", "mkdir", path=self.path.path, name=name, error=str(e))
            return None

        directory = Directory(path, logger=self._logger)
        self._debug("directory_created", "mkdir", path=self.path.path, directory=path.path)
        return directory

    def remove(self, force: bool = False) -> bool:
        """Remove the directory; with ``force`` its contents go first."""
        if force:
            self.foreach_child(self._remove_child)

        return self._attempt("remove", "removing_directory", lambda: os.rmdir(self.path.path), force=force)

    @staticmethod
    def _remove_child(child: File) -> None:
        if isinstance(child, Directory):
            child.remove(force=True)
        else:
            child.remove()

    def _make_child(self, entry: str) -> File:
        child = File.make(self.path.append(entry))
        child.set_logger(self._logger)
        return child

    def _children_of(self, handle: DirectoryHandle, skip: tuple = SPECIAL_ENTRIES) -> Iterator[File]:
        for entry in handle:
            if entry in skip:
                continue
            yield self._make_child(entry)

    def iter_children(self) -> Iterator[File]:
        """Yield a wrapper for every entry except ``.`` and ``..``."""
        with self.open() as handle:
            yield from self._children_of(handle)

    def foreach_child(self, callback: Callable[[File], object]) -> None:
        with closing(self.iter_children()) as children:
            for child in children:
                callback(child)

    def open(self) -> DirectoryHandle:
        self._info("opening_directory", "open", path=self.path.path)
        handle = DirectoryHandle(self.path, logger=self._logger)
        self._debug("directory_opened", "open", path=self.path.path)
        return handle
