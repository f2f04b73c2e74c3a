"""View model exposing a :class:`VerificationSession` to Qt widgets."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from pathlib import Path
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from core.config.schema import DEFAULT_COPY_MIN_LENGTH
from core.files import FileMetadata, FileReference
from core.session import VerificationSession
from core.state import ValidationState

logger = logging.getLogger(__name__)

ClipboardWriter = Callable[[str], None]
Notifier = Callable[[str], None]


def should_offer_copy(value: str | None, min_length: int = DEFAULT_COPY_MIN_LENGTH) -> bool:
    """Return True when ``value`` is long enough to plausibly be a full digest."""

    return bool(value) and len(value) > min_length


class VerifierViewModel(QObject):
    """Relay session events to the GUI thread as Qt signals."""

    state_changed = pyqtSignal(object)
    digest_changed = pyqtSignal(str)
    progress_changed = pyqtSignal(object, object)
    copied = pyqtSignal(str)

    # Worker-thread callbacks are funnelled through these so that slots run
    # in the thread owning the view model.
    _state_relay = pyqtSignal(object)
    _progress_relay = pyqtSignal(object, object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        session: VerificationSession | None = None,
        clipboard_writer: ClipboardWriter | None = None,
        notifier: Notifier | None = None,
        copy_min_length: int = DEFAULT_COPY_MIN_LENGTH,
    ) -> None:
        super().__init__(parent)
        self._session = session or VerificationSession()
        self._clipboard_writer = clipboard_writer
        self._notifier = notifier
        self._copy_min_length = copy_min_length
        self._last_digest = ""
        self._last_percent = -1
        self._state_relay.connect(self._on_state)
        self._progress_relay.connect(self._on_progress)
        self._unsubscribe = self._session.subscribe(self._state_relay.emit)
        self._session.add_progress_listener(self._relay_progress)

    @property
    def state(self) -> ValidationState:
        return self._session.state

    @property
    def digest(self) -> str | None:
        return self._session.digest

    @property
    def metadata(self) -> FileMetadata | None:
        return self._session.metadata

    @property
    def copy_min_length(self) -> int:
        return self._copy_min_length

    def select_file(self, ref: FileReference | str | Path) -> ValidationState:
        """Select the file picked by the user."""

        return self._session.select_file(ref)

    def compute(self) -> Future[str | None] | None:
        """Request digest computation for the selected file."""

        self._last_percent = -1
        return self._session.compute()

    def cancel(self) -> bool:
        """Cancel the computation in flight, if any."""

        return self._session.cancel()

    def verify(self, expected: str) -> ValidationState:
        """Compare the user-supplied digest with the computed one."""

        return self._session.verify(expected)

    def can_copy(self, value: str | None) -> bool:
        return should_offer_copy(value, self._copy_min_length)

    def copy_value(self, value: str | None) -> bool:
        """Copy ``value`` through the injected clipboard writer when it looks like a digest."""

        if not self.can_copy(value) or self._clipboard_writer is None:
            return False
        assert value is not None
        self._clipboard_writer(value)
        if self._notifier is not None:
            self._notifier("Digest copied")
        self.copied.emit(value)
        return True

    def shutdown(self, *, wait: bool = True) -> None:
        """Detach from the session and stop its worker."""

        self._unsubscribe()
        self._session.shutdown(wait=wait)

    def _relay_progress(self, done: int, total: int) -> None:
        # worker thread; relay at most one update per percent
        percent = (done * 100 // total) if total > 0 else -1
        if percent == self._last_percent and done < total:
            return
        self._last_percent = percent
        self._progress_relay.emit(done, total)

    @pyqtSlot(object)
    def _on_state(self, state: ValidationState) -> None:
        self.state_changed.emit(state)
        digest = self._session.digest or ""
        if digest != self._last_digest:
            self._last_digest = digest
            self.digest_changed.emit(digest)

    @pyqtSlot(object, object)
    def _on_progress(self, done: int, total: int) -> None:
        self.progress_changed.emit(done, total)


__all__ = ["ClipboardWriter", "Notifier", "VerifierViewModel", "should_offer_copy"]
