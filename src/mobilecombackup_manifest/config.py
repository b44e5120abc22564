"""Manifest configuration helpers."""

from dataclasses import dataclass, field
from typing import List

import yaml

from .constants import CHECKSUM_FILE, CHUNK_SIZE, CONFIG_FILE, MANIFEST_FILE
from .errors import ConfigError
from .ignore import IgnoreSpec
from .storage.base import ArchiveStorage

_PATTERN_CHARS = "*?[]!\\#"


@dataclass
class ManifestConfig:
    """Configuration controlling manifest generation and verification."""

    manifest_file: str = MANIFEST_FILE
    checksum_file: str = CHECKSUM_FILE
    exclude: List[str] = field(default_factory=list)
    include_hidden: List[str] = field(default_factory=lambda: [CONFIG_FILE])
    chunk_size: int = CHUNK_SIZE
    max_workers: int = 1

    def __post_init__(self):
        for name in ("manifest_file", "checksum_file"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value or "/" in value:
                raise ConfigError(f"{name} must be a plain file name, got {value!r}")
            # Names become exclusion patterns verbatim
            if any(c in _PATTERN_CHARS for c in value):
                raise ConfigError(f"{name} must not contain pattern characters {_PATTERN_CHARS!r}, got {value!r}")
        if self.manifest_file == self.checksum_file:
            raise ConfigError("manifest_file and checksum_file must differ")
        for name in ("exclude", "include_hidden"):
            value = getattr(self, name)
            if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                raise ConfigError(f"{name} must be a list of strings")
        for name in ("chunk_size", "max_workers"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

    def ignore_spec(self) -> IgnoreSpec:
        """Build the exclusion rules for this configuration."""
        return IgnoreSpec(
            manifest_file=self.manifest_file,
            checksum_file=self.checksum_file,
            extra=self.exclude,
            include=self.include_hidden,
        )


def load_manifest_config(storage: ArchiveStorage) -> ManifestConfig:
    """Load manifest configuration from the archive's .mobilecombackup.yaml.

    Settings live under a top-level ``manifest:`` key. A missing file or
    missing section yields the defaults.

    Raises:
        ConfigError: If the file is not valid YAML or has invalid settings
    """
    if not storage.exists(CONFIG_FILE):
        return ManifestConfig()

    with storage.open_read(CONFIG_FILE) as f:
        raw = f.read()

    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {CONFIG_FILE}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE} must contain a mapping")

    section = data.get("manifest") or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'manifest' section of {CONFIG_FILE} must be a mapping")

    known = set(ManifestConfig.__dataclass_fields__)
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"Unknown manifest settings in {CONFIG_FILE}: {', '.join(unknown)}")

    return ManifestConfig(**section)
