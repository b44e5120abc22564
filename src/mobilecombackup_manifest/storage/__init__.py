"""Storage package abstracting archive file access."""

from .base import ArchiveStorage, FileStat
from .factory import make_storage
from .fs import FilesystemStorage
from .memory import MemoryStorage

__all__ = [
    "ArchiveStorage",
    "FileStat",
    "FilesystemStorage",
    "MemoryStorage",
    "make_storage",
]
