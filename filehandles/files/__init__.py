"""File wrappers, one class per file type."""
from .file import File
from .regular_file import RegularFile
from .directory import Directory
from .lockable_directory import LockableDirectory
from .link import Link
from .socket import Socket
from .special import CharacterDevice, Fifo
from .encoded import EncodedFile, LineEncodedFile
from .registry import FileSystem, get_filesystem, set_filesystem

__all__ = [
    'File',
    'RegularFile',
    'Directory',
    'LockableDirectory',
    'Link',
    'Socket',
    'Fifo',
    'CharacterDevice',
    'EncodedFile',
    'LineEncodedFile',
    'FileSystem',
    'get_filesystem',
    'set_filesystem'
]
