"""Tests for core data models."""

import pytest

from mobilecombackup_manifest.core import (
    FileEntry,
    FileManifest,
    Severity,
    VerificationReport,
    Violation,
    ViolationType,
)
from mobilecombackup_manifest.errors import ManifestFormatError
from tests.fixtures.sample_archive import EMPTY_SHA256, FIXED_TIMESTAMP, HELLO_SHA256


@pytest.fixture
def manifest():
    return FileManifest(
        generated=FIXED_TIMESTAMP,
        generator="mobilecombackup-manifest 0.1.0",
        files=[
            FileEntry(name="calls/calls-2023.xml", size=13, checksum=HELLO_SHA256, modified=FIXED_TIMESTAMP),
            FileEntry(name="empty.txt", size=0, checksum=EMPTY_SHA256, modified=FIXED_TIMESTAMP),
        ],
    )


class TestFileManifest:
    """Test manifest document helpers and parsing."""

    def test_defaults_and_helpers(self, manifest):
        assert manifest.version == "1.0"
        assert manifest.names() == ["calls/calls-2023.xml", "empty.txt"]
        assert manifest.total_size == 13

    def test_parse_written_form(self, manifest):
        assert FileManifest.from_yaml(manifest.to_yaml()) == manifest

    def test_yaml_scalars_stay_strings(self, manifest):
        """Version and timestamps must not be re-typed by the YAML loader."""
        text = manifest.to_yaml()

        assert "version: '1.0'" in text
        parsed = FileManifest.from_yaml(text)
        assert parsed.version == "1.0"
        assert parsed.files[0].modified == FIXED_TIMESTAMP

    def test_empty_files_list(self):
        parsed = FileManifest.from_yaml(
            "version: '1.0'\ngenerated: '2024-01-15T10:30:45Z'\ngenerator: test\nfiles:\n"
        )

        assert parsed.files == []

    @pytest.mark.parametrize("text", [
        "files: [unclosed\n",
        "- just\n- a list\n",
        "version: '1.0'\nfiles: []\n",  # missing generated/generator
        "version: '1.0'\ngenerated: x\ngenerator: y\nfiles:\n- name: a.txt\n",
    ])
    def test_malformed_documents(self, text):
        with pytest.raises(ManifestFormatError) as exc_info:
            FileManifest.from_yaml(text)

        assert exc_info.value.path == "files.yaml"


class TestVerificationReport:
    """Test report aggregation."""

    def test_valid_report(self):
        report = VerificationReport(root="/archive", manifest_entries=2, total_size=2048)

        assert report.is_valid
        assert report.summary() == "2 files (2.0 KB), ✓ verified"

    def test_errors_and_warnings(self):
        report = VerificationReport(root="/archive", manifest_entries=1, total_size=10, violations=[
            Violation(type=ViolationType.MISSING_FILE, file="a.txt", message="missing"),
            Violation(type=ViolationType.INVALID_FORMAT, severity=Severity.WARNING, file="files.yaml", message="old"),
        ])

        assert not report.is_valid
        assert len(report.errors) == 1
        assert len(report.warnings) == 1
        assert report.count(ViolationType.MISSING_FILE) == 1
        assert report.summary() == "1 files (10.0 B), ✗ 1 errors, ⚠ 1 warnings"

    def test_warnings_only_is_valid(self):
        report = VerificationReport(root="/archive", violations=[
            Violation(type=ViolationType.INVALID_FORMAT, severity=Severity.WARNING, file="files.yaml", message="old"),
        ])

        assert report.is_valid
