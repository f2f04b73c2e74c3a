"""Custom exceptions for hash-checker."""

from __future__ import annotations


class HashCheckError(Exception):
    """Base exception for the project."""


class FileAccessError(HashCheckError, OSError):
    """Raised when a file reference cannot be opened or read."""


class ComputationError(HashCheckError):
    """Raised when the byte stream fails after the digest computation started."""


class ComputationCancelled(HashCheckError):
    """Raised when a digest computation is aborted through its cancel signal."""


__all__ = [
    "ComputationCancelled",
    "ComputationError",
    "FileAccessError",
    "HashCheckError",
]
