"""Shared test fixtures and utilities."""

import pytest

from mobilecombackup_manifest.storage import FilesystemStorage, MemoryStorage
from tests.fixtures.sample_archive import (
    FIXED_EPOCH,
    FIXED_TIME,
    FailingStorage,
    create_sample_archive,
)


@pytest.fixture
def fixed_clock():
    """Clock returning a constant "generated" time."""
    return lambda: FIXED_TIME


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path."""
    def _write(path: str, content: str = "test content"):
        file_path = tmp_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path
    return _write


@pytest.fixture
def archive(tmp_path):
    """Sample archive directory (see tests/fixtures/sample_archive.py)."""
    return create_sample_archive(tmp_path)


@pytest.fixture
def archive_storage(archive) -> FilesystemStorage:
    """Filesystem storage over the sample archive."""
    return FilesystemStorage(archive)


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """In-memory archive with fixed modification times."""
    storage = MemoryStorage()
    storage.put("calls/calls-2023.xml", b'<calls count="1"></calls>', mtime=FIXED_EPOCH)
    storage.put("sms/sms-2023.xml", b'<smses count="1"></smses>', mtime=FIXED_EPOCH)
    storage.put("summary.yaml", b"counts: {}\n", mtime=FIXED_EPOCH)
    return storage


@pytest.fixture
def failing_storage() -> FailingStorage:
    """Memory storage with failure injection."""
    storage = FailingStorage()
    storage.put("a.txt", b"alpha", mtime=FIXED_EPOCH)
    storage.put("b.txt", b"bravo", mtime=FIXED_EPOCH)
    return storage
