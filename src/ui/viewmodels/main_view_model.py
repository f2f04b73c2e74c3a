"""ViewModel coordinating application bootstrap and settings handling."""

from __future__ import annotations

import logging
from typing import Callable

from PyQt6.QtCore import QObject

from core.config import load_settings as _load_settings
from core.config.schema import VerifierSettings
from core.digest import DigestEngine
from core.session import VerificationSession
from utils.env import env_int

from .verifier_view_model import ClipboardWriter, Notifier, VerifierViewModel

logger = logging.getLogger(__name__)


class MainViewModel(QObject):
    """ViewModel coordinating startup tasks for :class:`ui.app.MainWindow`."""

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        load_settings: Callable[[], VerifierSettings] = _load_settings,
        session_factory: Callable[[DigestEngine], VerificationSession] | None = None,
    ) -> None:
        super().__init__(parent)
        settings = load_settings()
        chunk_size = env_int("HCK_CHUNK_SIZE", settings.chunk_size, min_value=1)
        if chunk_size != settings.chunk_size:
            logger.info("Chunk size overridden by HCK_CHUNK_SIZE: %d", chunk_size)
            settings = settings.model_copy(update={"chunk_size": chunk_size})
        self._settings = settings
        self._session_factory = session_factory or (lambda engine: VerificationSession(engine=engine))

    @property
    def settings(self) -> VerifierSettings:
        """Return the settings loaded at startup."""

        return self._settings

    def create_verifier_view_model(
        self,
        parent: QObject | None = None,
        *,
        clipboard_writer: ClipboardWriter | None = None,
        notifier: Notifier | None = None,
    ) -> VerifierViewModel:
        """Return a verifier view model backed by a fresh session."""

        engine = DigestEngine(chunk_size=self._settings.chunk_size)
        return VerifierViewModel(
            parent,
            session=self._session_factory(engine),
            clipboard_writer=clipboard_writer,
            notifier=notifier,
            copy_min_length=self._settings.copy_min_length,
        )


__all__ = ["MainViewModel"]
