"""Utility functions and helpers for davkeep.

- sanitize_device_name: filename-safe device names
- format_megabytes: human-readable backup sizes
- datetime helpers for metadata timestamps
"""

from .datetime_utils import format_timestamp_ms, get_current_datetime_local
from .utils import BYTES_PER_MEGABYTE, format_megabytes, sanitize_device_name

__all__ = [
    "BYTES_PER_MEGABYTE",
    "format_megabytes",
    "format_timestamp_ms",
    "get_current_datetime_local",
    "sanitize_device_name",
]
