"""SHA-256 digest computation over byte streams."""

from __future__ import annotations

import hashlib
import logging
import threading
from typing import BinaryIO, Callable

from core.errors import ComputationCancelled, ComputationError
from core.files import FileAccessor, FileReference

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8 * 1024
DIGEST_HEX_LENGTH = 64
EMPTY_DIGEST = hashlib.sha256(b"").hexdigest()


def normalize_digest(value: str) -> str:
    """Return ``value`` trimmed and lowercased for comparison."""

    return value.strip().lower()


def is_hex_digest(value: str) -> bool:
    """Return True when ``value`` looks like a full SHA-256 hex digest."""

    candidate = normalize_digest(value)
    if len(candidate) != DIGEST_HEX_LENGTH:
        return False
    return all(char in "0123456789abcdef" for char in candidate)


class DigestEngine:
    """Stream bytes through a fresh SHA-256 accumulator per call."""

    def __init__(self, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._chunk_size = max(1, int(chunk_size))

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def compute(
        self,
        stream: BinaryIO,
        *,
        cancel: threading.Event | None = None,
        progress: Callable[[int], None] | None = None,
    ) -> str:
        """Return the lowercase hex digest of everything left in ``stream``.

        ``cancel`` is checked before each chunk; once set, the read loop stops
        with :class:`ComputationCancelled`. ``progress`` receives the running
        byte count after every chunk. A failing read raises
        :class:`ComputationError` instead of returning a partial digest.
        """

        digest = hashlib.sha256()
        total = 0
        while True:
            if cancel is not None and cancel.is_set():
                raise ComputationCancelled(f"Cancelled after {total} bytes")
            try:
                chunk = stream.read(self._chunk_size)
            except OSError as exc:
                raise ComputationError(f"Read failed after {total} bytes: {exc}") from exc
            if not chunk:
                break
            digest.update(chunk)
            total += len(chunk)
            if progress is not None:
                progress(total)
        logger.debug("Digested %d bytes", total)
        return digest.hexdigest()

    def compute_file(
        self,
        accessor: FileAccessor,
        ref: FileReference,
        *,
        cancel: threading.Event | None = None,
        progress: Callable[[int], None] | None = None,
    ) -> str:
        """Open ``ref`` through ``accessor`` and return its digest."""

        with accessor.open(ref) as stream:
            return self.compute(stream, cancel=cancel, progress=progress)


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DIGEST_HEX_LENGTH",
    "DigestEngine",
    "EMPTY_DIGEST",
    "is_hex_digest",
    "normalize_digest",
]
