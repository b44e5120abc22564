"""Archive scanning: one manifest entry per regular file.

A scan is all-or-nothing. Any file that cannot be listed, stat'ed or read
aborts the scan with ScanError and no entries are returned.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from .constants import CHUNK_SIZE
from .core import FileEntry
from .errors import ScanError
from .hashing import hash_stream
from .ignore import IgnoreSpec
from .storage.base import ArchiveStorage
from .utils import timestamp_from_epoch

logger = logging.getLogger(__name__)


def list_candidates(storage: ArchiveStorage, ignore: Optional[IgnoreSpec] = None) -> List[str]:
    """List archive files that belong in the manifest, sorted by name.

    Args:
        storage: Archive storage to walk
        ignore: Exclusion rules (defaults to IgnoreSpec())

    Returns:
        Relative POSIX paths in code-point order

    Raises:
        ScanError: If a directory cannot be listed
    """
    if ignore is None:
        ignore = IgnoreSpec()

    try:
        names = [
            name for name in storage.iter_files(ignore.should_traverse)
            if not ignore.is_ignored(name)
        ]
    except OSError as e:
        raise ScanError(str(e.filename or ""), f"cannot list directory: {e}") from e

    return sorted(names)


def scan_file(storage: ArchiveStorage, name: str, chunk_size: int = CHUNK_SIZE) -> FileEntry:
    """Build the manifest entry for a single file.

    Size and modification time come from storage metadata; the content is
    streamed through SHA-256. The byte count read must agree with the
    recorded size.

    Raises:
        ScanError: If the file cannot be read or changed while being hashed
    """
    try:
        st = storage.stat(name)
        with storage.open_read(name) as f:
            checksum, bytes_read = hash_stream(f, chunk_size)
    except OSError as e:
        raise ScanError(name, str(e)) from e

    if bytes_read != st.size:
        raise ScanError(
            name,
            f"file changed during scan (size {st.size} bytes, read {bytes_read} bytes)"
        )

    return FileEntry(
        name=name,
        size=st.size,
        checksum=checksum,
        modified=timestamp_from_epoch(st.mtime),
    )


def scan(
    storage: ArchiveStorage,
    ignore: Optional[IgnoreSpec] = None,
    chunk_size: int = CHUNK_SIZE,
    max_workers: int = 1,
) -> List[FileEntry]:
    """Scan an archive and return one entry per candidate file.

    Args:
        storage: Archive storage to scan
        ignore: Exclusion rules (defaults to IgnoreSpec())
        chunk_size: Bytes per read while hashing
        max_workers: Files hashed concurrently; order of the result is
            the same for any value

    Returns:
        Entries sorted by name

    Raises:
        ScanError: On the first file or directory that cannot be read
    """
    names = list_candidates(storage, ignore)
    logger.debug("Scanning %d files with %d worker(s)", len(names), max_workers)

    if max_workers <= 1 or len(names) <= 1:
        entries = [scan_file(storage, name, chunk_size) for name in names]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # map() yields results in submission order and re-raises failures
            entries = list(executor.map(lambda n: scan_file(storage, n, chunk_size), names))

    logger.debug("Scanned %d files (%d bytes)", len(entries), sum(e.size for e in entries))
    return entries
