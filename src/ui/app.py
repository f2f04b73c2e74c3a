"""PyQt6 application entry point for hash-checker."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from utils.env import is_headless
from utils.paths import get_app_paths

HEADLESS = is_headless()

if HEADLESS:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

logger = logging.getLogger(__name__)


def _resolve_log_level(value: str | None) -> int:
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.upper())
    if isinstance(level, int):
        return level
    return logging.INFO


def setup_logging() -> None:
    """Configure logging to stdout and a rotating application log file."""

    level = _resolve_log_level(os.environ.get("HCK_LOG_LEVEL"))
    root_logger = logging.getLogger()

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        try:
            handler.close()
        except Exception:  # pragma: no cover - best effort cleanup
            pass

    root_logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        "%Y-%m-%d %H:%M:%S",
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    log_dir = get_app_paths().ensure_log_dir()
    file_handler = RotatingFileHandler(
        log_dir / "app.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)


if HEADLESS:

    class MainWindow:  # type: ignore[too-many-ancestors]
        """Placeholder window used when Qt widgets are unavailable."""

        def __init__(self, *args, **kwargs) -> None:  # noqa: D401 - Qt-compatible signature
            raise RuntimeError("hash-checker UI is unavailable in headless mode")

    def run() -> None:
        """Headless environments cannot launch the GUI."""

        raise RuntimeError("hash-checker UI is unavailable in headless mode")


else:
    from PyQt6.QtWidgets import QApplication, QMainWindow

    from ui.verifier_panel import VerifierPanel
    from ui.viewmodels import MainViewModel

    class MainWindow(QMainWindow):
        """Main window hosting the verifier panel."""

        def __init__(self, view_model: MainViewModel | None = None) -> None:
            super().__init__()
            self._view_model = view_model or MainViewModel(self)
            settings = self._view_model.settings
            self.setWindowTitle("SHA-256 Verifier")
            self._verifier_view_model = self._view_model.create_verifier_view_model(
                self,
                clipboard_writer=self._write_clipboard,
                notifier=self._show_toast,
            )
            self._panel = VerifierPanel(self, view_model=self._verifier_view_model)
            self.setCentralWidget(self._panel)
            self.statusBar()
            self.resize(settings.window_width, settings.window_height)

        @property
        def panel(self) -> VerifierPanel:
            return self._panel

        def _write_clipboard(self, text: str) -> None:
            clipboard = QApplication.clipboard()
            if clipboard is None:
                logger.warning("Clipboard unavailable; digest not copied")
                return
            clipboard.setText(text)

        def _show_toast(self, message: str) -> None:
            self.statusBar().showMessage(message, self._view_model.settings.toast_timeout_ms)

        def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
            self._verifier_view_model.shutdown(wait=False)
            super().closeEvent(event)

    def run() -> None:
        """Launch the hash-checker GUI application."""

        setup_logging()
        app = QApplication(sys.argv)
        app.setApplicationName("hash-checker")
        window = MainWindow()
        window.show()
        sys.exit(app.exec())


if __name__ == "__main__":
    run()
