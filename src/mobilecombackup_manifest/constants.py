"""Constants for mobilecombackup-manifest."""

# Archive files (relative to the archive root)
MANIFEST_FILE = "files.yaml"
CHECKSUM_FILE = "files.yaml.sha256"
CONFIG_FILE = ".mobilecombackup.yaml"
REJECTED_DIR = "rejected"

# Manifest schema
MANIFEST_VERSION = "1.0"
DIGEST_PREFIX = "sha256:"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Hashing
CHUNK_SIZE = 8192

# Version
TOOL_NAME = "mobilecombackup-manifest"
TOOL_VERSION = "0.1.0"
