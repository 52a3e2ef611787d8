"""Handles over open OS resources."""
from .base import Handle
from .lockable import LockableHandle, LockState
from .regular_file import RegularFileHandle
from .directory import DirectoryHandle
from .lockable_directory import LockableDirectoryHandle
from .socket import SocketHandle

__all__ = [
    'Handle',
    'LockableHandle',
    'LockState',
    'RegularFileHandle',
    'DirectoryHandle',
    'LockableDirectoryHandle',
    'SocketHandle'
]
