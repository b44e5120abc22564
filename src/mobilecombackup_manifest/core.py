"""Core data models for mobilecombackup-manifest.

The manifest (files.yaml) is a versioned inventory of every file in an
archive. It is rebuilt from scratch on every backup run and is guarded by
a detached checksum sidecar (files.yaml.sha256).
"""

from enum import Enum
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .constants import MANIFEST_FILE, MANIFEST_VERSION
from .errors import ManifestFormatError, SerializationError
from .utils import humanize_size


# ============= Manifest =============

class FileEntry(BaseModel):
    """Metadata for a single archived file.

    Field order is the serialization order.
    """

    name: str       # POSIX path relative to the archive root
    size: int       # Bytes, from filesystem metadata
    checksum: str   # sha256:...
    modified: str   # RFC 3339 UTC, e.g. 2024-01-15T10:30:45Z


class FileManifest(BaseModel):
    """Versioned inventory of an archive (stored as files.yaml)."""

    version: str = MANIFEST_VERSION
    generated: str
    generator: str
    files: List[FileEntry] = Field(default_factory=list)

    @property
    def total_size(self) -> int:
        """Total bytes of all listed files."""
        return sum(f.size for f in self.files)

    def names(self) -> List[str]:
        """Listed file names, in manifest order."""
        return [f.name for f in self.files]

    def to_yaml(self) -> str:
        """Deterministic YAML serialization.

        Key order follows field declaration order, so the same manifest
        always encodes to the same text.
        """
        try:
            return yaml.safe_dump(
                self.model_dump(),
                sort_keys=False,
                default_flow_style=False,
                allow_unicode=True,
            )
        except yaml.YAMLError as e:
            raise SerializationError(f"Failed to encode {MANIFEST_FILE}: {e}") from e

    @classmethod
    def from_yaml(cls, text: str, source: str = MANIFEST_FILE) -> "FileManifest":
        """Parse a manifest previously written by to_yaml.

        Raises:
            ManifestFormatError: If the text is not valid YAML or not a manifest
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ManifestFormatError(source, f"invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ManifestFormatError(source, "top level must be a mapping")

        # An empty archive serializes "files: []"; tolerate a bare "files:"
        if data.get("files") is None:
            data["files"] = []

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ManifestFormatError(source, str(e)) from e


# ============= Verification =============

class ViolationType(str, Enum):
    """Kind of problem found while verifying an archive."""

    INVALID_FORMAT = "invalid_format"
    MISSING_FILE = "missing_file"
    EXTRA_FILE = "extra_file"
    CHECKSUM_MISMATCH = "checksum_mismatch"
    SIZE_MISMATCH = "size_mismatch"


class Severity(str, Enum):
    """How serious a violation is."""

    ERROR = "error"
    WARNING = "warning"


class Violation(BaseModel):
    """Single verification finding."""

    type: ViolationType
    severity: Severity = Severity.ERROR
    file: str
    message: str
    expected: Optional[str] = None
    actual: Optional[str] = None


class VerificationReport(BaseModel):
    """Result of verifying an archive against its manifest."""

    root: str
    manifest_entries: int = 0
    total_size: int = 0
    violations: List[Violation] = Field(default_factory=list)

    @property
    def errors(self) -> List[Violation]:
        return [v for v in self.violations if v.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[Violation]:
        return [v for v in self.violations if v.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        """True when no error-severity violation was found."""
        return not self.errors

    def count(self, violation_type: ViolationType) -> int:
        return sum(1 for v in self.violations if v.type == violation_type)

    def summary(self) -> str:
        """Get human-readable summary."""
        parts = [f"{self.manifest_entries} files ({humanize_size(self.total_size)})"]
        if self.is_valid:
            parts.append("✓ verified")
        else:
            parts.append(f"✗ {len(self.errors)} errors")
        if self.warnings:
            parts.append(f"⚠ {len(self.warnings)} warnings")
        return ", ".join(parts)
