"""
Core Utilities.

Shared utility functions used across the SDK, CLI and TUI.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values handled by the toolkit are timezone-naive and
    assumed to be UTC, which keeps token expiry comparisons simple.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp as returned by OpenStack services.

    Accepts a trailing `Z` and explicit offsets. The result is converted to
    UTC and returned timezone-naive.

    Raises:
        ValueError: If the value is not a timestamp
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
