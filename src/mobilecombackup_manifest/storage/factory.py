"""Factory for creating archive storage instances."""

from pathlib import Path
from typing import Optional, Union

from .base import ArchiveStorage
from .fs import FilesystemStorage
from .memory import MemoryStorage


def make_storage(
    root: Optional[Union[str, Path]] = None,
    provider: str = "fs",
) -> ArchiveStorage:
    """
    Create storage instance for an archive.

    Args:
        root: Archive directory (required for the "fs" provider)
        provider: "fs" for a real directory, "memory" for an in-memory double

    Returns:
        ArchiveStorage instance

    Raises:
        ValueError: If configuration is invalid
        NotImplementedError: If provider is not supported
    """
    if provider == "fs":
        if root is None:
            raise ValueError("Archive root directory required for filesystem storage")
        return FilesystemStorage(Path(root))

    elif provider == "memory":
        return MemoryStorage()

    else:
        raise NotImplementedError(f"Provider {provider} not supported")
