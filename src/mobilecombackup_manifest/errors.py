"""Custom exceptions for mobilecombackup-manifest.

Storage write failures are not part of this hierarchy: they
reach the caller as the ``OSError`` the storage backend raised.
"""

from typing import Optional


class ManifestError(RuntimeError):
    """Base class for all manifest-related errors."""
    pass


# Scan Errors
class ScanError(ManifestError):
    """A file could not be listed, stat'ed or read during a scan."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to scan {path or '.'}: {reason}")


# Format Errors
class SerializationError(ManifestError):
    """Manifest could not be encoded to its on-disk form."""
    pass


class ManifestFormatError(ManifestError):
    """Persisted manifest or checksum sidecar could not be parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse {path}: {reason}")


# Integrity Errors
class IntegrityError(ManifestError):
    """Base class for data integrity errors."""
    pass


class ChecksumMismatchError(IntegrityError):
    """File digest doesn't match expected value."""

    def __init__(self, path: str, expected: str, actual: str):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum verification failed for {path}\n"
            f"  Expected: {expected}\n"
            f"  Got:      {actual}\n"
            f"The file may be corrupted or tampered with."
        )


class SidecarMissingError(IntegrityError):
    """Checksum sidecar for the manifest does not exist."""

    def __init__(self, path: str, manifest_path: Optional[str] = None):
        self.path = path
        self.manifest_path = manifest_path
        target = f" for {manifest_path}" if manifest_path else ""
        super().__init__(f"Checksum file {path} not found{target}")


# Configuration Errors
class ConfigError(ManifestError):
    """Invalid manifest configuration."""
    pass
