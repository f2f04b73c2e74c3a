"""Helpers for resolving application directories."""

from __future__ import annotations

from pathlib import Path

from core.config import AppPaths

_APP_PATHS = AppPaths()


def get_app_paths() -> AppPaths:
    """Return the current :class:`AppPaths` instance."""

    return _APP_PATHS


def set_app_paths(app_paths: AppPaths) -> None:
    """Override the global :class:`AppPaths` instance."""

    global _APP_PATHS
    _APP_PATHS = app_paths


def get_data_dir() -> Path:
    """Return the directory used to persist application data."""

    return _APP_PATHS.data_dir()


def get_log_dir() -> Path:
    """Return the directory used to store application log files."""

    return _APP_PATHS.log_dir()


__all__ = [
    "get_app_paths",
    "get_data_dir",
    "get_log_dir",
    "set_app_paths",
]
