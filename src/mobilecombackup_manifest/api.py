"""Stable API for archive manifest operations.

This module provides a minimal, stable API surface for the backup tool,
which calls write_manifest once per run after the archive data files are
finalized and verify_archive from its validate command.

Errors are raised to the caller; deciding whether to abort the run is the
backup tool's job.
"""

from pathlib import Path
from typing import Union

from .config import load_manifest_config
from .core import FileManifest, VerificationReport
from .generator import ManifestGenerator
from .storage import make_storage
from .verify import ManifestVerifier


def generate_manifest(root: Union[str, Path]) -> FileManifest:
    """Scan an archive directory and return its manifest without writing it.

    Args:
        root: Archive directory

    Raises:
        NotADirectoryError: If root is not a directory
        ConfigError: If .mobilecombackup.yaml has invalid manifest settings
        ScanError: If any file cannot be read
    """
    storage = make_storage(root)
    return ManifestGenerator(storage, load_manifest_config(storage)).generate_file_manifest()


def write_manifest(root: Union[str, Path], regenerate_checksum: bool = False) -> FileManifest:
    """Generate and persist files.yaml and files.yaml.sha256.

    Args:
        root: Archive directory
        regenerate_checksum: Replace an existing sidecar instead of keeping it

    Returns:
        The manifest that was written

    Example:
        >>> from mobilecombackup_manifest.api import write_manifest
        >>> manifest = write_manifest("/backups/phone")
        >>> len(manifest.files)
        42
    """
    storage = make_storage(root)
    generator = ManifestGenerator(storage, load_manifest_config(storage))
    manifest = generator.generate_file_manifest()
    if regenerate_checksum:
        generator.write_manifest_only(manifest)
        generator.regenerate_checksum()
    else:
        generator.write_manifest_files(manifest)
    return manifest


def verify_archive(root: Union[str, Path]) -> VerificationReport:
    """Verify an archive directory against its persisted manifest.

    Args:
        root: Archive directory

    Returns:
        Report listing every violation found
    """
    storage = make_storage(root)
    return ManifestVerifier(storage, load_manifest_config(storage)).verify()
