"""Shared pytest fixtures."""

from __future__ import annotations

import io
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.files import FileMetadata  # noqa: E402


class GatedStream(io.RawIOBase):
    """Byte stream whose reads block until the test releases it."""

    def __init__(self, payload: bytes, *, fail_after: int | None = None) -> None:
        super().__init__()
        self._buffer = io.BytesIO(payload)
        self._fail_after = fail_after
        self.started = threading.Event()
        self.release = threading.Event()
        self.reads = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self.started.set()
        if not self.release.wait(timeout=5):
            raise TimeoutError("stream was never released")
        self.reads += 1
        if self._fail_after is not None and self.reads > self._fail_after:
            raise OSError("device disconnected")
        return self._buffer.read(size)


class StreamAccessor:
    """FileAccessor double handing out one prepared stream."""

    def __init__(self, stream: io.RawIOBase, *, name: str = "payload.bin", size: int = 0) -> None:
        self.stream = stream
        self.name = name
        self.size = size
        self.opened = 0

    @contextmanager
    def open(self, ref) -> Iterator[io.RawIOBase]:
        self.opened += 1
        try:
            yield self.stream
        finally:
            self.stream.close()

    def metadata(self, ref) -> FileMetadata:
        return FileMetadata(name=self.name, size=self.size)


@pytest.fixture()
def make_file(tmp_path: Path) -> Callable[[str, bytes], Path]:
    def _make(name: str, payload: bytes) -> Path:
        target = tmp_path / name
        target.write_bytes(payload)
        return target

    return _make


@pytest.fixture()
def gated_stream() -> Callable[..., GatedStream]:
    return GatedStream


@pytest.fixture()
def stream_accessor() -> Callable[..., StreamAccessor]:
    return StreamAccessor
