"""Verification of an archive against its persisted manifest.

Checks performed by ManifestVerifier.verify():
1. files.yaml.sha256 matches the current files.yaml (tamper detection)
2. files.yaml is well formed (unique names, digest format, safe paths)
3. Every archived file is listed and every listed file exists
4. Every listed file still has the recorded checksum and size
"""

import logging
from pathlib import PurePosixPath
from typing import List, Optional

from .config import ManifestConfig
from .constants import MANIFEST_VERSION
from .core import FileManifest, Severity, VerificationReport, Violation, ViolationType
from .errors import ChecksumMismatchError, ManifestFormatError, ScanError, SidecarMissingError
from .hashing import hash_stream, parse_checksum_sidecar, validate_digest
from .scanner import list_candidates, scan_file
from .storage.base import ArchiveStorage
from .utils import parse_timestamp

logger = logging.getLogger(__name__)


def _is_safe_name(name: str) -> bool:
    """Normalized relative POSIX path naming a file below the root.

    Backslash is an ordinary file name character here, not a separator.
    """
    path = PurePosixPath(name)
    return (
        bool(path.parts)
        and not path.is_absolute()
        and ".." not in path.parts
        and path.as_posix() == name
    )


class ManifestVerifier:
    """Checks an archive against its files.yaml and files.yaml.sha256."""

    def __init__(self, storage: ArchiveStorage, config: Optional[ManifestConfig] = None):
        self.storage = storage
        self.config = config or ManifestConfig()

    @property
    def manifest_path(self) -> str:
        return self.config.manifest_file

    @property
    def checksum_path(self) -> str:
        return self.config.checksum_file

    def load_manifest(self) -> FileManifest:
        """Read and parse files.yaml.

        Raises:
            FileNotFoundError: If files.yaml does not exist
            ManifestFormatError: If files.yaml cannot be parsed
        """
        if not self.storage.exists(self.manifest_path):
            raise FileNotFoundError(f"Manifest not found: {self.manifest_path}")

        with self.storage.open_read(self.manifest_path) as f:
            raw = f.read()

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestFormatError(self.manifest_path, f"not UTF-8: {e}") from e

        return FileManifest.from_yaml(text, source=self.manifest_path)

    def verify_manifest_checksum(self) -> None:
        """Check files.yaml against the digest pinned in files.yaml.sha256.

        Raises:
            SidecarMissingError: If files.yaml.sha256 does not exist
            ManifestFormatError: If files.yaml.sha256 is malformed
            ChecksumMismatchError: If files.yaml changed since the sidecar was written
        """
        if not self.storage.exists(self.checksum_path):
            raise SidecarMissingError(self.checksum_path, self.manifest_path)

        with self.storage.open_read(self.checksum_path) as f:
            raw = f.read()

        try:
            expected = parse_checksum_sidecar(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise ManifestFormatError(self.checksum_path, str(e)) from e

        with self.storage.open_read(self.manifest_path) as f:
            actual, _ = hash_stream(f, self.config.chunk_size)

        if actual != expected:
            raise ChecksumMismatchError(self.manifest_path, expected, actual)

    def validate_format(self, manifest: FileManifest) -> List[Violation]:
        """Check manifest structure without touching archived files."""
        violations = []

        if manifest.version != MANIFEST_VERSION:
            violations.append(Violation(
                type=ViolationType.INVALID_FORMAT,
                severity=Severity.WARNING,
                file=self.manifest_path,
                message=f"Unknown manifest version {manifest.version!r} (expected {MANIFEST_VERSION!r})",
            ))

        seen = set()
        for i, entry in enumerate(manifest.files, start=1):
            context = f"{self.manifest_path} entry {i}"

            if entry.name in seen:
                violations.append(Violation(
                    type=ViolationType.INVALID_FORMAT,
                    file=self.manifest_path,
                    message=f"Duplicate file entry: {entry.name}",
                ))
            seen.add(entry.name)

            try:
                validate_digest(entry.checksum)
            except ValueError:
                violations.append(Violation(
                    type=ViolationType.INVALID_FORMAT,
                    file=context,
                    message=f"Invalid checksum format for {entry.name}: {entry.checksum}",
                ))

            if entry.size < 0:
                violations.append(Violation(
                    type=ViolationType.INVALID_FORMAT,
                    file=context,
                    message=f"Invalid size for {entry.name}: {entry.size} (must not be negative)",
                ))

            if not _is_safe_name(entry.name):
                violations.append(Violation(
                    type=ViolationType.INVALID_FORMAT,
                    file=context,
                    message=f"File path must be a normalized relative path without '..': {entry.name}",
                ))

            if entry.name in (self.manifest_path, self.checksum_path):
                violations.append(Violation(
                    type=ViolationType.INVALID_FORMAT,
                    file=context,
                    message=f"{self.manifest_path} should not include itself or its checksum: {entry.name}",
                ))

            try:
                parse_timestamp(entry.modified)
            except ValueError:
                violations.append(Violation(
                    type=ViolationType.INVALID_FORMAT,
                    file=context,
                    message=f"Invalid modified timestamp for {entry.name}: {entry.modified}",
                ))

        return violations

    def check_completeness(self, manifest: FileManifest) -> List[Violation]:
        """Compare listed files with the files actually in the archive.

        Raises:
            ScanError: If the archive cannot be listed
        """
        violations = []
        listed = set(manifest.names())
        actual = list_candidates(self.storage, self.config.ignore_spec())

        for name in actual:
            if name not in listed:
                violations.append(Violation(
                    type=ViolationType.EXTRA_FILE,
                    file=name,
                    message=f"File exists in archive but not listed in {self.manifest_path}: {name}",
                ))

        for name in manifest.names():
            if _is_safe_name(name) and not self.storage.exists(name):
                violations.append(Violation(
                    type=ViolationType.MISSING_FILE,
                    file=name,
                    message=f"File listed in {self.manifest_path} but not found in archive: {name}",
                ))

        return violations

    def validate_checksums(self, manifest: FileManifest) -> List[Violation]:
        """Re-hash listed files and compare checksum and size.

        Listed files that are absent are skipped; check_completeness
        reports them.
        """
        violations = []
        for entry in manifest.files:
            if not _is_safe_name(entry.name) or not self.storage.exists(entry.name):
                continue

            try:
                current = scan_file(self.storage, entry.name, self.config.chunk_size)
            except ScanError as e:
                violations.append(Violation(
                    type=ViolationType.CHECKSUM_MISMATCH,
                    file=entry.name,
                    message=f"Failed to calculate checksum for {entry.name}: {e.reason}",
                ))
                continue

            if current.checksum != entry.checksum:
                violations.append(Violation(
                    type=ViolationType.CHECKSUM_MISMATCH,
                    file=entry.name,
                    message=f"Checksum mismatch for {entry.name}",
                    expected=entry.checksum,
                    actual=current.checksum,
                ))

            if current.size != entry.size:
                violations.append(Violation(
                    type=ViolationType.SIZE_MISMATCH,
                    file=entry.name,
                    message=f"Size mismatch for {entry.name}",
                    expected=str(entry.size),
                    actual=str(current.size),
                ))

        return violations

    def _sidecar_violations(self) -> List[Violation]:
        try:
            self.verify_manifest_checksum()
        except SidecarMissingError as e:
            return [Violation(type=ViolationType.MISSING_FILE, file=self.checksum_path, message=str(e))]
        except ManifestFormatError as e:
            return [Violation(type=ViolationType.INVALID_FORMAT, file=self.checksum_path, message=str(e))]
        except ChecksumMismatchError as e:
            return [Violation(
                type=ViolationType.CHECKSUM_MISMATCH,
                file=self.manifest_path,
                message=f"{self.manifest_path} does not match {self.checksum_path}",
                expected=e.expected,
                actual=e.actual,
            )]
        return []

    def verify(self) -> VerificationReport:
        """Run every check and collect the findings.

        Raises:
            ScanError: If the archive cannot be listed
        """
        report = VerificationReport(root=str(getattr(self.storage, "root", type(self.storage).__name__)))

        try:
            manifest = self.load_manifest()
        except FileNotFoundError as e:
            report.violations.append(Violation(
                type=ViolationType.MISSING_FILE, file=self.manifest_path, message=str(e),
            ))
            return report
        except ManifestFormatError as e:
            report.violations.append(Violation(
                type=ViolationType.INVALID_FORMAT, file=self.manifest_path, message=str(e),
            ))
            return report

        report.manifest_entries = len(manifest.files)
        report.total_size = manifest.total_size

        report.violations.extend(self._sidecar_violations())
        report.violations.extend(self.validate_format(manifest))
        report.violations.extend(self.check_completeness(manifest))
        report.violations.extend(self.validate_checksums(manifest))

        logger.debug("Verified %s: %s", report.root, report.summary())
        return report
