"""Gitignore-style exclusion rules for archive scans."""

from typing import Iterable, List

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern

from .constants import CHECKSUM_FILE, CONFIG_FILE, MANIFEST_FILE, REJECTED_DIR


def default_patterns(
    manifest_file: str = MANIFEST_FILE,
    checksum_file: str = CHECKSUM_FILE,
    include: Iterable[str] = (CONFIG_FILE,),
) -> List[str]:
    """Build the patterns every archive scan excludes.

    Args:
        manifest_file: Manifest name at the archive root
        checksum_file: Sidecar name at the archive root
        include: Hidden file names that are still archive content

    Returns:
        Gitignore-style pattern lines
    """
    patterns = [
        # The manifest never lists itself or its sidecar
        f"/{manifest_file}",
        f"/{checksum_file}",

        # Partial writes
        "*.tmp",

        # Records rejected during import
        f"/{REJECTED_DIR}/",

        # Hidden files and directories (includes atomic-write temp files)
        ".*",
    ]
    patterns.extend(f"!{name}" for name in include)
    return patterns


class IgnoreSpec:
    """Decides which archive paths are manifest candidates."""

    def __init__(
        self,
        manifest_file: str = MANIFEST_FILE,
        checksum_file: str = CHECKSUM_FILE,
        extra: Iterable[str] = (),
        include: Iterable[str] = (CONFIG_FILE,),
    ):
        """Initialize ignore spec with default and custom patterns.

        Args:
            manifest_file: Manifest name at the archive root
            checksum_file: Sidecar name at the archive root
            extra: Additional patterns to exclude
            include: Hidden file names that are still archive content
        """
        self.patterns = default_patterns(manifest_file, checksum_file, include)
        self.patterns.extend(extra)

        # Compile patterns once for efficiency
        self.spec = PathSpec.from_lines(GitWildMatchPattern, self.patterns)

    def is_ignored(self, relpath: str) -> bool:
        """Check if an archive-relative POSIX path should be excluded.

        Args:
            relpath: Archive-relative path in POSIX format (forward slashes)

        Returns:
            True if the path matches any exclusion pattern
        """
        return self.spec.match_file(relpath)

    def should_traverse(self, dirpath: str) -> bool:
        """Check if a directory should be descended into during scanning.

        Args:
            dirpath: Archive-relative directory path in POSIX format

        Returns:
            True if the directory should be traversed
        """
        # Add trailing slash to match directory patterns
        if not dirpath.endswith("/"):
            dirpath = dirpath + "/"

        return not self.spec.match_file(dirpath)
