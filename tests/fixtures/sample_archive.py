"""Sample archive fixture - source of truth for test data."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

from mobilecombackup_manifest.storage import MemoryStorage


# 2024-01-15T10:30:45Z
FIXED_EPOCH = 1705314645
FIXED_TIME = datetime(2024, 1, 15, 10, 30, 45, tzinfo=timezone.utc)
FIXED_TIMESTAMP = "2024-01-15T10:30:45Z"

# Conformance digests
EMPTY_SHA256 = "sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
HELLO_SHA256 = "sha256:dffd6021bb2bd5b0af676290809ec3a53191dd81c7f70a4b28688a362182986f"


# Files that belong in the manifest
ARCHIVE_FILES: Dict[str, str] = {
    ".mobilecombackup.yaml": "repository_structure_version: '1'\n",
    "contacts.yaml": "contacts: []\n",
    "summary.yaml": "counts:\n  calls: 1\n  sms: 1\n",
    "calls/calls-2023.xml": '<calls count="1"></calls>',
    "sms/sms-2023.xml": '<smses count="1"></smses>',
}

# Files every scan must skip
EXCLUDED_FILES: Dict[str, str] = {
    "files.yaml": "stale manifest",
    "files.yaml.sha256": "stale checksum",
    "rejected/rejected-calls.xml": "<calls></calls>",
    ".hidden-file": "hidden",
    "calls/partial.xml.tmp": "partial",
}


def create_sample_archive(root: Path) -> Path:
    """Write the sample archive below root and return root."""
    for name, content in {**ARCHIVE_FILES, **EXCLUDED_FILES}.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


def get_expected_files() -> List[str]:
    """Names the manifest of the sample archive lists, in order."""
    return sorted(ARCHIVE_FILES)


class FailingStorage(MemoryStorage):
    """Memory storage that raises prepared errors for selected operations."""

    def __init__(self, files=None):
        super().__init__(files)
        self.read_errors = {}
        self.write_errors = {}
        self.list_error = None
        self.stat_sizes = {}

    def iter_files(self, should_traverse=None):
        if self.list_error is not None:
            raise self.list_error
        return super().iter_files(should_traverse)

    def stat(self, path):
        st = super().stat(path)
        if path in self.stat_sizes:
            return st._replace(size=self.stat_sizes[path])
        return st

    def open_read(self, path):
        if path in self.read_errors:
            raise self.read_errors[path]
        return super().open_read(path)

    def write_bytes(self, path, data):
        if path in self.write_errors:
            raise self.write_errors[path]
        super().write_bytes(path, data)
