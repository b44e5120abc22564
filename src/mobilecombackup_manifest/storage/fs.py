"""Filesystem archive storage implementation."""

import logging
import os
import stat as stat_module
import tempfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Callable, Iterator, Optional

from .base import FileStat

logger = logging.getLogger(__name__)


def _raise_walk_error(err: OSError) -> None:
    # os.walk ignores listing errors unless told otherwise
    raise err


def _fsync_dir(path: Path) -> None:
    """Fsync a directory to ensure directory entry updates are durable.

    This is a best-effort operation that may not work on all platforms/filesystems.
    Windows and some filesystems don't support directory fsync.
    """
    try:
        # Use O_DIRECTORY flag if available (Linux)
        flags = os.O_RDONLY
        if hasattr(os, "O_DIRECTORY"):
            flags |= os.O_DIRECTORY

        fd = os.open(str(path), flags)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except OSError:
        # Expected on Windows or filesystems that don't support directory fsync
        logger.debug("Directory fsync not supported for %s", path)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Atomically write bytes to file with crash safety.

    1. Writes to a hidden temp file in the same directory, fsynced
    2. Atomic rename to target path (appears all-at-once)
    3. Fsync parent directory to ensure rename is durable

    The temp file is removed if any step fails.

    Args:
        path: Target file path
        data: Content to write
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
        suffix=""
    ) as f:
        tmp = Path(f.name)
        try:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        except BaseException:
            f.close()
            tmp.unlink(missing_ok=True)
            raise

    try:
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise

    _fsync_dir(path.parent)


class FilesystemStorage:
    """
    Archive storage backed by a local directory.

    Paths are resolved below ``root``; absolute paths and ``..`` components
    are rejected so callers cannot escape the archive.
    """

    def __init__(self, root: Path):
        """
        Initialize filesystem storage.

        Args:
            root: Existing archive directory

        Raises:
            NotADirectoryError: If root is not an existing directory
        """
        self.root = Path(root)
        if not self.root.is_dir():
            raise NotADirectoryError(f"Archive root is not a directory: {self.root}")

    def __repr__(self) -> str:
        return f"FilesystemStorage({str(self.root)!r})"

    def _resolve(self, path: str) -> Path:
        """
        Map a relative POSIX path to an absolute path below root.

        Raises:
            ValueError: If the path is absolute or contains '..'
        """
        rel = PurePosixPath(path)
        if rel.is_absolute() or ".." in rel.parts or not rel.parts:
            raise ValueError(f"Invalid archive path: {path!r}")
        return self.root.joinpath(*rel.parts)

    def iter_files(
        self, should_traverse: Optional[Callable[[str], bool]] = None
    ) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_raise_walk_error):
            rel_dir = Path(dirpath).relative_to(self.root)

            if should_traverse is not None:
                dirnames[:] = [
                    d for d in dirnames
                    if should_traverse((rel_dir / d).as_posix())
                ]

            for name in filenames:
                full = Path(dirpath) / name
                mode = full.lstat().st_mode
                # Symlinks, sockets, FIFOs and devices are not archive content
                if not stat_module.S_ISREG(mode):
                    continue
                yield (rel_dir / name).as_posix()

    def stat(self, path: str) -> FileStat:
        st = self._resolve(path).stat()
        return FileStat(size=st.st_size, mtime=st.st_mtime)

    def open_read(self, path: str) -> BinaryIO:
        return self._resolve(path).open("rb")

    def write_bytes(self, path: str, data: bytes) -> None:
        target = self._resolve(path)
        atomic_write_bytes(target, data)
        logger.debug("Wrote %s (%d bytes)", target, len(data))

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def remove(self, path: str) -> None:
        self._resolve(path).unlink(missing_ok=True)
