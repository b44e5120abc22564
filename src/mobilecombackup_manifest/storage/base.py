"""Base protocol for archive storage implementations."""

from typing import BinaryIO, Callable, Iterator, NamedTuple, Optional, Protocol


class FileStat(NamedTuple):
    """Filesystem metadata needed for a manifest entry."""

    size: int     # Bytes
    mtime: float  # Unix epoch seconds


class ArchiveStorage(Protocol):
    """
    Protocol for archive storage implementations.

    All paths are relative to the archive root in POSIX form (forward
    slashes). Implementations raise OSError subclasses on failure
    (FileNotFoundError for missing paths) and never swallow them.
    """

    def iter_files(
        self, should_traverse: Optional[Callable[[str], bool]] = None
    ) -> Iterator[str]:
        """
        Yield every regular file below the root, recursively.

        Symlinks and special files are not yielded. Order is unspecified.

        Args:
            should_traverse: Optional predicate on a relative directory path;
                directories for which it returns False are not descended into
        """
        ...

    def stat(self, path: str) -> FileStat:
        """
        Get size and modification time of a file.

        Args:
            path: Relative file path
        """
        ...

    def open_read(self, path: str) -> BinaryIO:
        """
        Open a file for streaming reads.

        The returned object is a context manager.

        Args:
            path: Relative file path
        """
        ...

    def write_bytes(self, path: str, data: bytes) -> None:
        """
        Atomically create or replace a file.

        Readers observe either the old content or the new content, never a
        partial write.

        Args:
            path: Relative file path
            data: Complete new content
        """
        ...

    def exists(self, path: str) -> bool:
        """
        Check if a file exists.

        Args:
            path: Relative file path
        """
        ...

    def remove(self, path: str) -> None:
        """
        Delete a file; succeeds silently if it does not exist.

        Args:
            path: Relative file path
        """
        ...
