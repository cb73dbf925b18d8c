"""General helpers shared by the pipeline and the CLI."""

import re

BYTES_PER_MEGABYTE = 1024 * 1024

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_device_name(name: str) -> str:
    """Strip every character outside [A-Za-z0-9_-].

    Args:
        name: Raw device name

    Returns:
        Name safe to embed in a backup filename (may be empty)

    """
    return _UNSAFE_NAME_CHARS.sub("", name)


def format_megabytes(size_bytes: int) -> str:
    """Format a byte count as megabytes with two decimals ("1.50 MB")."""
    return f"{size_bytes / BYTES_PER_MEGABYTE:.2f} MB"
