"""Tests for :mod:`utils.format`."""

from __future__ import annotations

import pytest

from utils.format import format_size


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (-5, "0 B"),
        (0, "0 B"),
        (1, "1 B"),
        (1000, "1,000 B"),
        (1023, "1,023 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (5 * 1024 * 1024 + 256 * 1024, "5.25 MB"),
        (3 * 1024**3, "3 GB"),
        (2048 * 1024**3, "2,048 GB"),
    ],
)
def test_format_size(size: int, expected: str) -> None:
    assert format_size(size) == expected


def test_format_size_limits_fraction_digits() -> None:
    assert format_size(1024 + 1) == "1 KB"
    assert format_size(1024 + 100) == "1.1 KB"
    assert format_size(1024 + 110) == "1.11 KB"
