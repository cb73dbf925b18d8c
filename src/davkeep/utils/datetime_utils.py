"""Datetime utilities for consistent timestamp handling."""

from datetime import UTC, datetime


def get_current_datetime_local() -> datetime:
    """Get current datetime in local timezone.

    Returns:
        datetime object in local timezone.

    """
    return datetime.now().astimezone()


def format_timestamp_ms(timestamp_ms: int) -> str:
    """Render a millisecond epoch timestamp as a local date string.

    Args:
        timestamp_ms: Milliseconds since the Unix epoch

    Returns:
        "YYYY-MM-DD HH:MM:SS" in the local timezone

    """
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)
    return moment.astimezone().strftime("%Y-%m-%d %H:%M:%S")
