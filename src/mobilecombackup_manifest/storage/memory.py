"""In-memory archive storage implementation for testing."""

import io
import time
from typing import BinaryIO, Callable, Dict, Iterator, Optional, Tuple, Union

from .base import FileStat


class MemoryStorage:
    """
    Dict-backed store for unit tests (avoids touching the real filesystem).

    Behaves like FilesystemStorage: missing files raise FileNotFoundError,
    writes replace content whole, directories exist implicitly.
    """

    def __init__(self, files: Optional[Dict[str, bytes]] = None):
        """
        Initialize memory store.

        Args:
            files: Optional initial content, relative path -> bytes
        """
        self._files: Dict[str, Tuple[bytes, float]] = {}
        for path, data in (files or {}).items():
            self.put(path, data)

    def put(self, path: str, data: Union[bytes, str], mtime: Optional[float] = None) -> None:
        """Store a file directly, optionally with a fixed modification time.

        Text is stored UTF-8 encoded.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._files[path] = (bytes(data), time.time() if mtime is None else mtime)

    def read_bytes(self, path: str) -> bytes:
        """Return the whole content of a file."""
        return self._get(path)[0]

    def _get(self, path: str) -> Tuple[bytes, float]:
        try:
            return self._files[path]
        except KeyError:
            raise FileNotFoundError(f"No such file in memory storage: {path}") from None

    def iter_files(
        self, should_traverse: Optional[Callable[[str], bool]] = None
    ) -> Iterator[str]:
        for path in list(self._files):
            if should_traverse is not None:
                parts = path.split("/")[:-1]
                dirs = ["/".join(parts[:i + 1]) for i in range(len(parts))]
                if not all(should_traverse(d) for d in dirs):
                    continue
            yield path

    def stat(self, path: str) -> FileStat:
        data, mtime = self._get(path)
        return FileStat(size=len(data), mtime=mtime)

    def open_read(self, path: str) -> BinaryIO:
        return io.BytesIO(self._get(path)[0])

    def write_bytes(self, path: str, data: bytes) -> None:
        self.put(path, data)

    def exists(self, path: str) -> bool:
        return path in self._files

    def remove(self, path: str) -> None:
        self._files.pop(path, None)
