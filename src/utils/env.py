"""Helpers for interrogating runtime environment flags."""

from __future__ import annotations

import os
from typing import Mapping

_FALSEY = {"", "0", "false", "no", "off"}


def is_headless(env: Mapping[str, str] | None = None) -> bool:
    """Return True when the application must not create Qt widgets."""
    source = os.environ if env is None else env
    return source.get("HCK_HEADLESS", "").strip().lower() not in _FALSEY


def env_int(
    name: str,
    default: int | None = None,
    *,
    min_value: int | None = None,
    env: Mapping[str, str] | None = None,
) -> int | None:
    """Read an integer override from the environment.

    Unset, blank or malformed values, and values below ``min_value``, yield
    ``default``.
    """

    source = os.environ if env is None else env
    raw = source.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if min_value is not None and value < min_value:
        return default
    return value


__all__ = ["env_int", "is_headless"]
