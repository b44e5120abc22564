"""Manifest generation for archives.

Generates files.yaml describing every archived file and the
files.yaml.sha256 sidecar that pins it for tamper detection.

Write policy:
- files.yaml is rewritten on every call to write_manifest_only
- files.yaml.sha256 is only created when absent; regenerate_checksum is the
  explicit way to refresh it

Storage errors propagate unchanged. If the sidecar write fails inside
write_manifest_files, the freshly written manifest stays in place.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from .config import ManifestConfig
from .constants import MANIFEST_VERSION, TOOL_NAME, TOOL_VERSION
from .core import FileManifest
from .hashing import format_checksum_sidecar, hash_stream
from .scanner import scan
from .storage.base import ArchiveStorage
from .utils import format_timestamp, utc_now

logger = logging.getLogger(__name__)

GENERATOR_ID = f"{TOOL_NAME} {TOOL_VERSION}"


class ManifestGenerator:
    """Builds and persists the manifest of one archive."""

    def __init__(
        self,
        storage: ArchiveStorage,
        config: Optional[ManifestConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            storage: Archive storage the manifest describes and lives in
            config: Manifest settings (defaults to ManifestConfig())
            clock: Source of the "generated" timestamp (defaults to UTC now)
        """
        self.storage = storage
        self.config = config or ManifestConfig()
        self.clock = clock or utc_now

    @property
    def manifest_path(self) -> str:
        return self.config.manifest_file

    @property
    def checksum_path(self) -> str:
        return self.config.checksum_file

    def generate_file_manifest(self) -> FileManifest:
        """Scan the archive and assemble a new manifest.

        Returns:
            Manifest with entries sorted by name

        Raises:
            ScanError: If any file cannot be read; no manifest is returned
        """
        entries = scan(
            self.storage,
            ignore=self.config.ignore_spec(),
            chunk_size=self.config.chunk_size,
            max_workers=self.config.max_workers,
        )
        return FileManifest(
            version=MANIFEST_VERSION,
            generated=format_timestamp(self.clock()),
            generator=GENERATOR_ID,
            files=entries,
        )

    def serialize(self, manifest: FileManifest) -> bytes:
        """Encode a manifest in its canonical on-disk form.

        Raises:
            SerializationError: If the manifest cannot be encoded
        """
        return manifest.to_yaml().encode("utf-8")

    def write_manifest_only(self, manifest: FileManifest) -> None:
        """Write files.yaml, replacing any existing manifest.

        The checksum sidecar is not touched.
        """
        data = self.serialize(manifest)
        self.storage.write_bytes(self.manifest_path, data)
        logger.debug("Wrote %s with %d entries", self.manifest_path, len(manifest.files))

    def write_checksum_only(self) -> None:
        """Write files.yaml.sha256 for the current files.yaml, if absent.

        An existing sidecar is left as is, even when it no longer matches
        the manifest.

        Raises:
            FileNotFoundError: If the sidecar must be created but files.yaml is missing
        """
        if self.storage.exists(self.checksum_path):
            logger.debug("%s exists, not overwriting", self.checksum_path)
            return

        with self.storage.open_read(self.manifest_path) as f:
            digest, _ = hash_stream(f, self.config.chunk_size)

        self.storage.write_bytes(self.checksum_path, format_checksum_sidecar(digest).encode("utf-8"))
        logger.debug("Wrote %s (%s)", self.checksum_path, digest)

    def write_manifest_files(self, manifest: FileManifest) -> None:
        """Write files.yaml, then create files.yaml.sha256 if absent."""
        self.write_manifest_only(manifest)
        self.write_checksum_only()

    def regenerate_checksum(self) -> None:
        """Replace files.yaml.sha256 with the digest of the current files.yaml.

        Raises:
            FileNotFoundError: If files.yaml is missing; the old sidecar is kept
        """
        if not self.storage.exists(self.manifest_path):
            raise FileNotFoundError(f"Manifest not found: {self.manifest_path}")

        self.storage.remove(self.checksum_path)
        logger.debug("Removed %s for regeneration", self.checksum_path)
        self.write_checksum_only()
