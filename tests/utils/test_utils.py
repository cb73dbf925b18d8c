"""Tests for general helpers."""

import re

import pytest

from davkeep.utils import (
    format_megabytes,
    format_timestamp_ms,
    sanitize_device_name,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("laptop", "laptop"),
        ("My PC (2)", "MyPC2"),
        ("dev-box_01", "dev-box_01"),
        ("ünïcode", "ncode"),
        ("!!!", ""),
    ],
)
def test_sanitize_device_name(raw: str, expected: str) -> None:
    """Only [A-Za-z0-9_-] survives."""
    assert sanitize_device_name(raw) == expected


@pytest.mark.parametrize(
    ("size", "expected"),
    [(0, "0.00 MB"), (1048576, "1.00 MB"), (1572864, "1.50 MB")],
)
def test_format_megabytes(size: int, expected: str) -> None:
    """Sizes render with two decimals."""
    assert format_megabytes(size) == expected


def test_format_timestamp_ms_shape() -> None:
    """Timestamps render as local date and time."""
    text = format_timestamp_ms(1_714_560_000_000)

    assert re.fullmatch(r"2024-0[45]-\d{2} \d{2}:\d{2}:00", text)
