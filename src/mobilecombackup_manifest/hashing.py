"""Hashing utilities for archive manifests.

This module provides streaming SHA-256 digests in the ``sha256:<hex>`` form
used by manifest entries, plus encoding and decoding of the detached
checksum sidecar that guards the manifest itself.
"""

import hashlib
import re
from pathlib import Path
from typing import BinaryIO, Tuple

from .constants import CHUNK_SIZE, DIGEST_PREFIX

_HEX64 = re.compile(r"^[0-9a-f]{64}$")


def hash_stream(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Tuple[str, int]:
    """Compute SHA256 hash of a binary stream.

    The stream is consumed in fixed-size chunks so arbitrarily large files
    never need to be held in memory.

    Args:
        stream: Readable binary stream, positioned at the start
        chunk_size: Bytes to read per iteration

    Returns:
        Tuple of (digest in format "sha256:xxxx", number of bytes read)
    """
    sha256 = hashlib.sha256()
    total = 0
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        sha256.update(chunk)
        total += len(chunk)
    return f"{DIGEST_PREFIX}{sha256.hexdigest()}", total


def compute_file_digest(path: Path, chunk_size: int = CHUNK_SIZE) -> str:
    """Compute SHA256 hash of file contents.

    Simple byte-for-byte hashing - any change invalidates the digest.

    Args:
        path: Path to file to hash
        chunk_size: Bytes to read per iteration

    Returns:
        SHA256 digest in format "sha256:xxxx"
    """
    with Path(path).open("rb") as f:
        digest, _ = hash_stream(f, chunk_size)
    return digest


def compute_bytes_digest(data: bytes) -> str:
    """Compute SHA256 hash of an in-memory buffer."""
    return f"{DIGEST_PREFIX}{hashlib.sha256(data).hexdigest()}"


def validate_digest(digest: str) -> str:
    """Validate and extract SHA256 hex from digest string.

    Args:
        digest: Digest string in format "sha256:hexvalue"

    Returns:
        The 64-character hex string

    Raises:
        ValueError: If digest format is invalid
    """
    if not isinstance(digest, str) or not digest.startswith(DIGEST_PREFIX):
        raise ValueError(f"Invalid digest scheme: {digest!r}")

    hex_part = digest[len(DIGEST_PREFIX):]
    if not _HEX64.fullmatch(hex_part):
        raise ValueError(f"Invalid sha256 hex (must be 64 lowercase hex chars): {hex_part!r}")

    return hex_part


def format_checksum_sidecar(digest: str) -> str:
    """Render the content of a checksum sidecar file.

    The sidecar holds exactly one line: the digest followed by a newline.

    Args:
        digest: Digest in format "sha256:xxxx"

    Returns:
        Sidecar text, e.g. "sha256:ab12...\\n"
    """
    validate_digest(digest)
    return f"{digest}\n"


def parse_checksum_sidecar(text: str) -> str:
    """Extract the digest from checksum sidecar content.

    Accepts the canonical "sha256:<hex>" line as well as the coreutils
    "<hex>  <filename>" line written by older versions of the backup tool.

    Args:
        text: Raw sidecar content

    Returns:
        Digest in format "sha256:xxxx"

    Raises:
        ValueError: If the content matches neither form
    """
    line = text.strip()
    if not line or "\n" in line:
        raise ValueError(f"Checksum file must contain exactly one line, got {text!r}")

    if line.startswith(DIGEST_PREFIX):
        validate_digest(line)
        return line

    # coreutils form: "<hex>  <filename>" (filename optional)
    hex_part = line.split()[0]
    if not _HEX64.fullmatch(hex_part):
        raise ValueError(f"Invalid checksum file content: {line!r}")
    return f"{DIGEST_PREFIX}{hex_part}"


__all__ = [
    "hash_stream",
    "compute_file_digest",
    "compute_bytes_digest",
    "validate_digest",
    "format_checksum_sidecar",
    "parse_checksum_sidecar",
]
