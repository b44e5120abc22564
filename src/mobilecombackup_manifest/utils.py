"""Utility functions for mobilecombackup-manifest."""

from datetime import datetime, timezone

from .constants import TIMESTAMP_FORMAT


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def format_timestamp(dt: datetime) -> str:
    """Format a datetime as RFC 3339 UTC with second precision.

    Naive datetimes are taken to be UTC.

    Examples:
        datetime(2024, 1, 15, 10, 30, 45, 123) -> "2024-01-15T10:30:45Z"
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def timestamp_from_epoch(epoch: float) -> str:
    """Format a Unix epoch (e.g. st_mtime) as RFC 3339 UTC."""
    return format_timestamp(datetime.fromtimestamp(epoch, tz=timezone.utc))


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 UTC timestamp written by format_timestamp.

    Raises:
        ValueError: If the string is not in the canonical form
    """
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Get the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
