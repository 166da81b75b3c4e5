"""Timestamp formatting utilities."""

from datetime import datetime, timezone


def now() -> str:
    """
    Local timestamp suitable for directory and file names.

    Returns:
        Timestamp string (e.g., "20251114_123456")
    """
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_iso() -> str:
    """
    Current UTC time in ISO 8601 format with millisecond precision.

    Examples:
        now_iso()
        # "2025-11-13T18:45:40.572Z"
    """
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")
