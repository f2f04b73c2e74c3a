"""Validation state machine driving the verifier UI."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Callable

from core.digest import is_hex_digest, normalize_digest
from core.files import FileMetadata

logger = logging.getLogger(__name__)

StateListener = Callable[["ValidationState"], None]


class StateKind(enum.Enum):
    """Enumerate the variants of :class:`ValidationState`."""

    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    CALCULATING = "calculating"
    SUCCESS = "success"
    ERROR = "error"
    MISSING_INPUT = "missing_input"
    CANCELLED = "cancelled"


TERMINAL_KINDS = frozenset({StateKind.SUCCESS, StateKind.ERROR, StateKind.MISSING_INPUT})


@dataclass(frozen=True)
class ValidationState:
    """Tagged state value; only ``FILE_SELECTED`` carries file metadata."""

    kind: StateKind
    file: FileMetadata | None = None
    message: str | None = None

    @classmethod
    def idle(cls) -> "ValidationState":
        return cls(StateKind.IDLE)

    @classmethod
    def file_selected(cls, metadata: FileMetadata) -> "ValidationState":
        return cls(StateKind.FILE_SELECTED, file=metadata)

    @classmethod
    def calculating(cls) -> "ValidationState":
        return cls(StateKind.CALCULATING)

    @classmethod
    def success(cls) -> "ValidationState":
        return cls(StateKind.SUCCESS)

    @classmethod
    def error(cls, message: str | None = None) -> "ValidationState":
        return cls(StateKind.ERROR, message=message)

    @classmethod
    def missing_input(cls) -> "ValidationState":
        return cls(StateKind.MISSING_INPUT)

    @classmethod
    def cancelled(cls, message: str | None = None) -> "ValidationState":
        return cls(StateKind.CANCELLED, message=message)

    @property
    def name(self) -> str | None:
        return self.file.name if self.file is not None else None

    @property
    def size(self) -> str | None:
        """Formatted size of the selected file, e.g. ``"1.5 KB"``."""

        return self.file.display_size if self.file is not None else None

    @property
    def is_terminal(self) -> bool:
        return self.kind in TERMINAL_KINDS


class ValidationStateMachine:
    """Hold the current :class:`ValidationState` and apply events one at a time.

    Every event method takes the same lock, so transitions never interleave
    even when computation results arrive from a worker thread. Each accepted
    compute request is identified by an integer token; completions carrying a
    token other than the current one belong to a superseded computation and
    are dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._state = ValidationState.idle()
        self._metadata: FileMetadata | None = None
        self._digest: str | None = None
        self._token = 0
        self._in_flight: int | None = None
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ValidationState:
        with self._lock:
            return self._state

    @property
    def digest(self) -> str | None:
        """Digest of the selected file, present only after a completed computation."""

        with self._lock:
            return self._digest

    @property
    def metadata(self) -> FileMetadata | None:
        with self._lock:
            return self._metadata

    @property
    def in_flight_token(self) -> int | None:
        with self._lock:
            return self._in_flight

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for state changes and return an unsubscribe callable."""

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                try:
                    self._listeners.remove(listener)
                except ValueError:
                    pass

        return _unsubscribe

    def select_file(self, metadata: FileMetadata) -> ValidationState:
        """Select a new file, discarding the digest and any in-flight computation."""

        with self._lock:
            if self._in_flight is not None:
                logger.info("Superseding in-flight computation %d", self._in_flight)
            self._metadata = metadata
            self._digest = None
            self._in_flight = None
            self._token += 1
            new_state = self._transition(ValidationState.file_selected(metadata))
        return new_state

    def request_compute(self) -> int | None:
        """Enter ``CALCULATING`` and return the computation token.

        Returns None without changing state when no file is selected or a
        computation is already running.
        """

        with self._lock:
            if self._metadata is None:
                logger.debug("Compute ignored: no file selected")
                return None
            if self._state.kind is StateKind.CALCULATING:
                logger.debug("Compute ignored: computation %s in flight", self._in_flight)
                return None
            self._token += 1
            self._in_flight = self._token
            self._digest = None
            token = self._token
            self._transition(ValidationState.calculating())
        return token

    def finish_computation(self, token: int, digest: str) -> bool:
        """Attach ``digest`` and return to ``FILE_SELECTED`` if ``token`` is current."""

        with self._lock:
            if not self._accepts(token):
                logger.debug("Discarding stale digest for computation %d", token)
                return False
            assert self._metadata is not None
            self._digest = digest
            self._in_flight = None
            self._transition(ValidationState.file_selected(self._metadata))
        return True

    def fail_computation(self, token: int, message: str) -> bool:
        """Move to ``ERROR`` if ``token`` is current; no digest is kept."""

        with self._lock:
            if not self._accepts(token):
                logger.debug("Discarding stale failure for computation %d", token)
                return False
            self._digest = None
            self._in_flight = None
            self._transition(ValidationState.error(message))
        return True

    def cancel_computation(self, token: int | None = None, message: str | None = None) -> bool:
        """Move to ``CANCELLED``; ``token`` defaults to the computation in flight."""

        with self._lock:
            if token is None:
                token = self._in_flight
            if token is None or not self._accepts(token):
                return False
            self._digest = None
            self._in_flight = None
            self._transition(ValidationState.cancelled(message or "Computation cancelled"))
        return True

    def verify(self, expected: str) -> ValidationState:
        """Compare ``expected`` against the current digest.

        Blank input yields ``MISSING_INPUT`` regardless of the digest.
        Comparison is whitespace-trimmed and case-insensitive. While a
        computation is running the event is ignored.
        """

        with self._lock:
            if self._state.kind is StateKind.CALCULATING:
                logger.debug("Verify ignored while calculating")
                return self._state
            candidate = normalize_digest(expected or "")
            if not candidate:
                new_state = ValidationState.missing_input()
            elif self._digest is None:
                new_state = ValidationState.error("No digest has been computed for this file")
            elif candidate == self._digest:
                new_state = ValidationState.success()
            elif not is_hex_digest(candidate):
                new_state = ValidationState.error("Expected value is not a SHA-256 digest")
            else:
                new_state = ValidationState.error("Digests do not match")
            self._transition(new_state)
        return new_state

    def _accepts(self, token: int) -> bool:
        return self._in_flight is not None and token == self._in_flight

    def _transition(self, new_state: ValidationState) -> ValidationState:
        previous = self._state
        self._state = new_state
        logger.debug("State %s -> %s", previous.kind.value, new_state.kind.value)
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:  # pragma: no cover
                logger.exception("State listener %r failed", listener)
        return new_state


__all__ = [
    "StateKind",
    "StateListener",
    "TERMINAL_KINDS",
    "ValidationState",
    "ValidationStateMachine",
]
