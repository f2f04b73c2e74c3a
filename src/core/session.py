"""Verification session tying file access, digest computation and state together."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable

from core.digest import DigestEngine
from core.errors import ComputationCancelled, ComputationError, FileAccessError
from core.files import FileAccessor, FileMetadata, FileReference
from core.state import StateListener, ValidationState, ValidationStateMachine

logger = logging.getLogger(__name__)

ProgressListener = Callable[[int, int], None]


class VerificationSession:
    """Single entry point used by the presentation layer.

    Digest computation runs on ``executor`` (one worker thread by default)
    while the state machine reports ``CALCULATING`` right away. The session
    owns the cancel event of the computation in flight; selecting another
    file or calling :meth:`cancel` raises it.
    """

    def __init__(
        self,
        *,
        accessor: FileAccessor | None = None,
        engine: DigestEngine | None = None,
        executor: Executor | None = None,
        machine: ValidationStateMachine | None = None,
    ) -> None:
        self._accessor = accessor or FileAccessor()
        self._engine = engine or DigestEngine()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="hck-digest")
        self._machine = machine or ValidationStateMachine()
        self._lock = threading.Lock()
        self._reference: FileReference | None = None
        self._cancel_event: threading.Event | None = None
        self._progress_listeners: list[ProgressListener] = []

    @property
    def state(self) -> ValidationState:
        return self._machine.state

    @property
    def digest(self) -> str | None:
        return self._machine.digest

    @property
    def metadata(self) -> FileMetadata | None:
        return self._machine.metadata

    @property
    def reference(self) -> FileReference | None:
        with self._lock:
            return self._reference

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; it may be called from the worker thread."""

        return self._machine.subscribe(listener)

    def add_progress_listener(self, listener: ProgressListener) -> None:
        """Register ``listener(bytes_read, total_bytes)`` for computation progress."""

        with self._lock:
            self._progress_listeners.append(listener)

    def select_file(self, ref: FileReference) -> ValidationState:
        """Select ``ref`` and abandon any computation still running."""

        metadata = self._accessor.metadata(ref)
        with self._lock:
            self._reference = ref
            previous = self._cancel_event
            self._cancel_event = None
        if previous is not None:
            previous.set()
        logger.info("Selected %s (%s)", metadata.name, metadata.display_size)
        return self._machine.select_file(metadata)

    def compute(self) -> Future[str | None] | None:
        """Start computing the digest of the selected file.

        Returns the worker future, or None when the request was ignored
        because nothing is selected or a computation is already running. The
        future resolves to the digest, or to None when the computation failed,
        was cancelled or was superseded by another selection; failures are
        reported through the state instead.
        """

        with self._lock:
            token = self._machine.request_compute()
            if token is None:
                return None
            ref = self._reference
            cancel = threading.Event()
            self._cancel_event = cancel
        metadata = self._machine.metadata
        total = metadata.size if metadata is not None else 0
        logger.info("Computing digest %d for %s", token, ref)
        future = self._executor.submit(self._run, token, ref, cancel, total)
        return future

    def cancel(self) -> bool:
        """Raise the cancel signal of the running computation.

        The state moves to ``CANCELLED`` immediately; the worker stops before
        its next chunk and its result is discarded.
        """

        with self._lock:
            cancel = self._cancel_event
            self._cancel_event = None
        if cancel is None:
            return False
        cancel.set()
        return self._machine.cancel_computation()

    def verify(self, expected: str) -> ValidationState:
        """Compare ``expected`` with the computed digest."""

        state = self._machine.verify(expected)
        logger.info("Verification result: %s", state.kind.value)
        return state

    def shutdown(self, *, wait: bool = True) -> None:
        """Cancel outstanding work and release the executor if the session created it."""

        with self._lock:
            cancel = self._cancel_event
            self._cancel_event = None
        if cancel is not None:
            cancel.set()
            self._machine.cancel_computation()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _run(self, token: int, ref: FileReference, cancel: threading.Event, total: int) -> str | None:
        def _progress(done: int) -> None:
            if self._machine.in_flight_token != token:
                return
            with self._lock:
                listeners = list(self._progress_listeners)
            for listener in listeners:
                listener(done, total)

        try:
            digest = self._engine.compute_file(self._accessor, ref, cancel=cancel, progress=_progress)
        except ComputationCancelled as exc:
            logger.info("Computation %d cancelled: %s", token, exc)
            self._machine.cancel_computation(token)
            return None
        except (FileAccessError, ComputationError) as exc:
            logger.warning("Computation %d failed: %s", token, exc)
            self._machine.fail_computation(token, str(exc))
            return None
        except Exception as exc:
            logger.exception("Unexpected failure while computing digest %d", token)
            self._machine.fail_computation(token, f"Unexpected error: {exc}")
            return None
        finally:
            with self._lock:
                if self._cancel_event is cancel:
                    self._cancel_event = None
        if not self._machine.finish_computation(token, digest):
            logger.debug("Computation %d superseded; digest discarded", token)
            return None
        logger.info("Computation %d finished: %s", token, digest)
        return digest


__all__ = ["ProgressListener", "VerificationSession"]
