"""
Core Utilities.

Shared helpers used across the backend.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and
    assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_rating(value: float) -> str:
    """Render an aggregate rating with one decimal, e.g. 4.0 -> "4.0"."""
    return f"{value:.1f}"
