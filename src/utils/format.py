"""Human readable formatting helpers."""

from __future__ import annotations

SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_size(size: int) -> str:
    """Render ``size`` bytes using binary units, e.g. ``1536 -> "1.5 KB"``."""

    if size <= 0:
        return "0 B"
    # integer base-1024 logarithm, clamped to the largest unit
    group = min((int(size).bit_length() - 1) // 10, len(SIZE_UNITS) - 1)
    scaled = size / (1024**group)
    text = f"{scaled:,.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[group]}"


__all__ = ["SIZE_UNITS", "format_size"]
