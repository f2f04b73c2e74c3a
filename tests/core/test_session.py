"""Tests for :class:`core.session.VerificationSession`."""

from __future__ import annotations

import hashlib
import io
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

import pytest

from core.digest import EMPTY_DIGEST, DigestEngine
from core.files import FileMetadata
from core.session import VerificationSession
from core.state import StateKind


@pytest.fixture()
def session() -> Iterable[VerificationSession]:
    instance = VerificationSession()
    try:
        yield instance
    finally:
        instance.shutdown()


def test_empty_file_scenario(session: VerificationSession, make_file) -> None:
    target = make_file("empty.bin", b"")

    selected = session.select_file(target)
    assert selected.kind is StateKind.FILE_SELECTED
    assert (selected.name, selected.size) == ("empty.bin", "0 B")

    future = session.compute()
    assert future is not None
    assert future.result(timeout=5) == EMPTY_DIGEST
    assert session.state.kind is StateKind.FILE_SELECTED
    assert session.digest == EMPTY_DIGEST

    assert session.verify(EMPTY_DIGEST.upper()).kind is StateKind.SUCCESS


def test_compute_without_selection_is_ignored(session: VerificationSession) -> None:
    assert session.compute() is None
    assert session.state.kind is StateKind.IDLE


def test_compute_reports_progress(make_file) -> None:
    payload = b"q" * 20_000
    target = make_file("payload.bin", payload)
    events: list[tuple[int, int]] = []
    session = VerificationSession(engine=DigestEngine(chunk_size=8192))
    session.add_progress_listener(lambda done, total: events.append((done, total)))
    try:
        session.select_file(target)
        future = session.compute()
        assert future is not None
        assert future.result(timeout=5) == hashlib.sha256(payload).hexdigest()
    finally:
        session.shutdown()

    assert events == [(8192, 20_000), (16384, 20_000), (20_000, 20_000)]


def test_missing_file_recovers_into_error(session: VerificationSession, make_file) -> None:
    target = make_file("vanishing.bin", b"abc")
    session.select_file(target)
    target.unlink()

    future = session.compute()
    assert future is not None
    assert future.result(timeout=5) is None

    state = session.state
    assert state.kind is StateKind.ERROR
    assert state.message is not None and state.message.startswith("Cannot open file")
    assert session.digest is None


def test_read_failure_recovers_into_error(gated_stream, stream_accessor) -> None:
    stream = gated_stream(b"abc" * 10, fail_after=1)
    stream.release.set()
    accessor = stream_accessor(stream)
    session = VerificationSession(accessor=accessor, engine=DigestEngine(chunk_size=4))
    try:
        session.select_file("remote://payload")
        future = session.compute()
        assert future is not None
        assert future.result(timeout=5) is None
    finally:
        session.shutdown()

    assert session.state.kind is StateKind.ERROR
    assert "device disconnected" in (session.state.message or "")
    assert session.digest is None
    assert stream.closed


def test_second_compute_while_calculating_is_noop(gated_stream, stream_accessor) -> None:
    payload = b"0123456789" * 100
    stream = gated_stream(payload)
    accessor = stream_accessor(stream, size=len(payload))
    session = VerificationSession(accessor=accessor)
    try:
        session.select_file("payload")
        first = session.compute()
        assert first is not None
        assert stream.started.wait(timeout=5)

        assert session.state.kind is StateKind.CALCULATING
        assert session.compute() is None

        stream.release.set()
        assert first.result(timeout=5) == hashlib.sha256(payload).hexdigest()
    finally:
        session.shutdown()

    assert accessor.opened == 1
    assert session.digest == hashlib.sha256(payload).hexdigest()
    assert session.state.kind is StateKind.FILE_SELECTED


def test_cancel_aborts_computation(gated_stream, stream_accessor) -> None:
    stream = gated_stream(b"x" * 100_000)
    session = VerificationSession(accessor=stream_accessor(stream), engine=DigestEngine(chunk_size=16))
    try:
        session.select_file("payload")
        future = session.compute()
        assert future is not None
        assert stream.started.wait(timeout=5)

        assert session.cancel()
        assert session.state.kind is StateKind.CANCELLED

        stream.release.set()
        assert future.result(timeout=5) is None
    finally:
        session.shutdown()

    assert session.state.kind is StateKind.CANCELLED
    assert session.digest is None
    assert stream.reads <= 2


def test_cancel_without_computation_returns_false(session: VerificationSession) -> None:
    assert session.cancel() is False


def test_selecting_new_file_discards_running_computation(gated_stream, stream_accessor, make_file) -> None:
    stream = gated_stream(b"y" * 4096)
    accessor = stream_accessor(stream)
    session = VerificationSession(accessor=accessor)
    try:
        session.select_file("first")
        future = session.compute()
        assert future is not None
        assert stream.started.wait(timeout=5)

        accessor.name = "second.bin"
        selected = session.select_file("second")
        stream.release.set()
        assert future.result(timeout=5) is None
    finally:
        session.shutdown()

    assert selected.name == "second.bin"
    assert session.state == selected
    assert session.digest is None
    assert session.verify(hashlib.sha256(b"y" * 4096).hexdigest()).kind is StateKind.ERROR


def test_listener_sees_calculating_before_completion(make_file) -> None:
    target = make_file("data.bin", b"hello")
    kinds: list[StateKind] = []
    done = threading.Event()
    session = VerificationSession()

    def listener(state) -> None:
        kinds.append(state.kind)
        if len(kinds) == 3:
            done.set()

    session.subscribe(listener)
    try:
        session.select_file(target)
        session.compute()
        assert done.wait(timeout=5)
    finally:
        session.shutdown()

    assert kinds == [StateKind.FILE_SELECTED, StateKind.CALCULATING, StateKind.FILE_SELECTED]


def test_shutdown_cancels_running_work(gated_stream, stream_accessor) -> None:
    stream = gated_stream(b"z" * 1024)
    session = VerificationSession(accessor=stream_accessor(stream), engine=DigestEngine(chunk_size=8))
    session.select_file("payload")
    future = session.compute()
    assert future is not None
    assert stream.started.wait(timeout=5)

    stream.release.set()
    session.shutdown()

    assert future.done()
    assert session.state.kind in {StateKind.CANCELLED, StateKind.FILE_SELECTED}


def test_reference_tracks_selection(session: VerificationSession, tmp_path: Path) -> None:
    target = tmp_path / "a.bin"
    session.select_file(target)

    assert session.reference == target
    assert session.metadata is not None and session.metadata.name == "a.bin"


class _ReselectingAccessor:
    """Selects another file as soon as the stream of the first one is closed."""

    def __init__(self) -> None:
        self.session: VerificationSession | None = None

    @contextmanager
    def open(self, ref) -> Iterator[io.BytesIO]:
        try:
            yield io.BytesIO(b"abc")
        finally:
            if ref == "first":
                assert self.session is not None
                self.session.select_file("second")

    def metadata(self, ref) -> FileMetadata:
        return FileMetadata(name=str(ref), size=3)


def test_digest_superseded_after_last_read_is_not_returned() -> None:
    accessor = _ReselectingAccessor()
    session = VerificationSession(accessor=accessor)
    accessor.session = session
    try:
        session.select_file("first")
        future = session.compute()
        assert future is not None
        assert future.result(timeout=5) is None
    finally:
        session.shutdown()

    assert session.state.kind is StateKind.FILE_SELECTED
    assert session.state.name == "second"
    assert session.digest is None


def test_superseded_computation_reports_no_progress(gated_stream, stream_accessor) -> None:
    stream = gated_stream(b"w" * 1024)
    events: list[tuple[int, int]] = []
    session = VerificationSession(accessor=stream_accessor(stream, size=1024), engine=DigestEngine(chunk_size=16))
    session.add_progress_listener(lambda done, total: events.append((done, total)))
    try:
        session.select_file("first")
        future = session.compute()
        assert future is not None
        assert stream.started.wait(timeout=5)

        session.select_file("second")
        stream.release.set()
        assert future.result(timeout=5) is None
    finally:
        session.shutdown()

    assert events == []
    assert session.state.kind is StateKind.FILE_SELECTED
