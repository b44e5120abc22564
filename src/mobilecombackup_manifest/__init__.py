"""File manifest generation and integrity verification for call/SMS archives."""

from .constants import TOOL_VERSION as __version__
from .core import FileEntry, FileManifest, VerificationReport, Violation, ViolationType
from .generator import ManifestGenerator
from .scanner import scan
from .verify import ManifestVerifier

__all__ = [
    "FileEntry",
    "FileManifest",
    "ManifestGenerator",
    "ManifestVerifier",
    "VerificationReport",
    "Violation",
    "ViolationType",
    "scan",
    "__version__",
]
