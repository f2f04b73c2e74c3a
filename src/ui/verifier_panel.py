"""Single-file SHA-256 verification panel."""

from __future__ import annotations

import logging
from typing import Callable

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from core.state import StateKind, ValidationState
from ui.viewmodels import VerifierViewModel
from ui.widgets.spinner_overlay import SpinnerOverlay

logger = logging.getLogger(__name__)

FilePicker = Callable[[QWidget], "str | None"]

DIGEST_PLACEHOLDER = "Pick a file and press Compute to see its SHA-256"

_CARD_COLORS = {
    StateKind.SUCCESS: "#a5d6a7",
    StateKind.ERROR: "#ffcdd2",
    StateKind.MISSING_INPUT: "#fff9c4",
}
_DEFAULT_CARD_COLOR = "#e0e0e0"


def _default_file_picker(parent: QWidget) -> str | None:
    file_path, _ = QFileDialog.getOpenFileName(parent, "Select file to verify", "", "All files (*)")
    return file_path or None


def describe_state(state: ValidationState) -> tuple[str, str]:
    """Return the card headline and detail line for ``state``."""

    kind = state.kind
    if kind is StateKind.IDLE:
        return "Click to add a file to verify", ""
    if kind is StateKind.FILE_SELECTED:
        return state.name or "", f"{state.size} · ready to compute"
    if kind is StateKind.CALCULATING:
        return "Calculating…", ""
    if kind is StateKind.SUCCESS:
        return "✔ Digests match", ""
    if kind is StateKind.MISSING_INPUT:
        return "Paste the expected SHA-256 first", ""
    if kind is StateKind.CANCELLED:
        return "Computation cancelled", state.message or ""
    return "✘ Verification failed", state.message or ""


class _ClickableFrame(QFrame):
    clicked = pyqtSignal()

    def mouseReleaseEvent(self, event) -> None:  # noqa: N802 - Qt override
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit()
        super().mouseReleaseEvent(event)


class VerifierPanel(QWidget):
    """Pick a file, compute its digest and compare it against a pasted value."""

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        view_model: VerifierViewModel | None = None,
        file_picker: FilePicker | None = None,
    ) -> None:
        super().__init__(parent)
        self._view_model = view_model or VerifierViewModel(self)
        self._file_picker = file_picker or _default_file_picker

        self._card = _ClickableFrame(self)
        self._card.setObjectName("stateCard")
        self._card.setMinimumHeight(160)
        self._card.setCursor(Qt.CursorShape.PointingHandCursor)
        self._card.clicked.connect(self.pick_file)
        self._card_title = QLabel(self._card)
        self._card_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._card_title.setStyleSheet("font-size: 15px; font-weight: 600;")
        self._card_detail = QLabel(self._card)
        self._card_detail.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._card_detail.setWordWrap(True)
        card_layout = QVBoxLayout(self._card)
        card_layout.addStretch(1)
        card_layout.addWidget(self._card_title)
        card_layout.addWidget(self._card_detail)
        card_layout.addStretch(1)
        self._overlay = SpinnerOverlay(self._card)

        self._digest_box = _ClickableFrame(self)
        self._digest_box.setObjectName("digestBox")
        self._digest_box.setStyleSheet("#digestBox { background: #f0f0f0; border-radius: 12px; }")
        self._digest_box.clicked.connect(self._on_digest_clicked)
        digest_caption = QLabel("Output SHA-256", self._digest_box)
        digest_caption.setStyleSheet("color: gray; font-size: 11px;")
        self._digest_label = QLabel(DIGEST_PLACEHOLDER, self._digest_box)
        self._digest_label.setWordWrap(True)
        self._digest_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        digest_layout = QVBoxLayout(self._digest_box)
        digest_layout.addWidget(digest_caption)
        digest_layout.addWidget(self._digest_label)

        self._compute_button = QPushButton("Compute SHA-256", self)
        self._compute_button.clicked.connect(self._on_compute_clicked)
        self._cancel_button = QPushButton("Cancel", self)
        self._cancel_button.clicked.connect(self._view_model.cancel)
        compute_row = QHBoxLayout()
        compute_row.addStretch()
        compute_row.addWidget(self._cancel_button)
        compute_row.addWidget(self._compute_button)

        self._expected_edit = QLineEdit(self)
        self._expected_edit.setPlaceholderText("Paste expected SHA-256")
        self._expected_edit.returnPressed.connect(self._on_verify_clicked)
        self._verify_button = QPushButton("Verify", self)
        self._verify_button.clicked.connect(self._on_verify_clicked)
        verify_row = QHBoxLayout()
        verify_row.addStretch()
        verify_row.addWidget(self._verify_button)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.addWidget(self._card)
        layout.addSpacing(16)
        layout.addWidget(self._digest_box)
        layout.addLayout(compute_row)
        layout.addSpacing(12)
        layout.addWidget(self._expected_edit)
        layout.addLayout(verify_row)
        layout.addStretch(1)

        self._cancel_shortcut = QShortcut(QKeySequence("Esc"), self)
        self._cancel_shortcut.activated.connect(self._view_model.cancel)

        self._view_model.state_changed.connect(self._render_state)
        self._view_model.digest_changed.connect(self._render_digest)
        self._view_model.progress_changed.connect(self._overlay.set_progress)
        self._render_state(self._view_model.state)
        self._render_digest(self._view_model.digest or "")

    @property
    def view_model(self) -> VerifierViewModel:
        return self._view_model

    def pick_file(self) -> None:
        """Ask the host file picker for a file and select it, superseding any running computation."""

        path = self._file_picker(self)
        if not path:
            return
        self._view_model.select_file(path)

    def _on_compute_clicked(self) -> None:
        if self._view_model.compute() is None:
            logger.debug("Compute request ignored in state %s", self._view_model.state.kind.value)

    def _on_verify_clicked(self) -> None:
        self._view_model.verify(self._expected_edit.text())

    def _on_digest_clicked(self) -> None:
        self._view_model.copy_value(self._view_model.digest)

    def _render_state(self, state: ValidationState) -> None:
        title, detail = describe_state(state)
        self._card_title.setText(title)
        self._card_detail.setText(detail)
        self._card_detail.setVisible(bool(detail))
        color = _CARD_COLORS.get(state.kind, _DEFAULT_CARD_COLOR)
        self._card.setStyleSheet(f"#stateCard {{ background: {color}; border-radius: 20px; }}")

        calculating = state.kind is StateKind.CALCULATING
        if calculating:
            self._overlay.show()
        else:
            self._overlay.hide()
        has_file = self._view_model.metadata is not None
        self._compute_button.setEnabled(has_file and not calculating)
        self._cancel_button.setEnabled(calculating)
        self._verify_button.setEnabled(not calculating)

    def _render_digest(self, digest: str) -> None:
        self._digest_label.setText(digest or DIGEST_PLACEHOLDER)
        if self._view_model.can_copy(digest):
            self._digest_box.setToolTip("Click to copy")
            self._digest_box.setCursor(Qt.CursorShape.PointingHandCursor)
        else:
            self._digest_box.setToolTip("")
            self._digest_box.unsetCursor()


__all__ = ["VerifierPanel", "describe_state"]
