"""Semi-transparent overlay showing digest computation progress."""

from __future__ import annotations

from PyQt6.QtCore import QEvent, Qt
from PyQt6.QtGui import QColor, QPainter
from PyQt6.QtWidgets import QFrame, QLabel, QProgressBar, QVBoxLayout, QWidget

_PROGRESS_STEPS = 1000


class SpinnerOverlay(QWidget):
    """Cover a widget with a message and a progress bar."""

    def __init__(self, parent: QWidget, message: str = "Calculating… (Esc to cancel)") -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setAutoFillBackground(False)

        self._message_label = QLabel(message, self)
        self._message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._message_label.setStyleSheet("color: white; font-size: 13px; font-weight: 600;")
        self._progress = QProgressBar(self)
        self._progress.setTextVisible(False)
        self._progress.setRange(0, 0)

        self._bg_color = QColor(0, 0, 0, 110)

        panel = QFrame(self)
        panel.setObjectName("overlayPanel")
        panel.setStyleSheet("#overlayPanel { background: #2b2b2b; border-radius: 12px; }")
        panel_layout = QVBoxLayout(panel)
        panel_layout.setContentsMargins(16, 16, 16, 16)
        panel_layout.addWidget(self._message_label, 0, Qt.AlignmentFlag.AlignCenter)
        panel_layout.addSpacing(8)
        panel_layout.addWidget(self._progress)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.addStretch(1)
        layout.addWidget(panel)
        layout.addStretch(1)
        self.hide()
        parent.installEventFilter(self)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._bg_color)
        painter.end()

    def eventFilter(self, obj, event):  # type: ignore[override]
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._reposition()
        return super().eventFilter(obj, event)

    def show(self, message: str | None = None) -> None:  # type: ignore[override]
        if message is not None:
            self._message_label.setText(message)
        self._progress.setRange(0, 0)
        self._reposition()
        super().show()
        self.raise_()

    def set_progress(self, done: int, total: int) -> None:
        """Switch to a determinate bar once the total byte count is known."""

        if total <= 0:
            self._progress.setRange(0, 0)
            return
        self._progress.setRange(0, _PROGRESS_STEPS)
        self._progress.setValue(min(_PROGRESS_STEPS, done * _PROGRESS_STEPS // total))

    def progress_value(self) -> int:
        return self._progress.value()

    def _reposition(self) -> None:
        parent = self.parentWidget()
        if parent is None:
            return
        self.setGeometry(parent.rect())


__all__ = ["SpinnerOverlay"]
