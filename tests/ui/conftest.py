"""Qt application fixture shared by UI tests."""

from __future__ import annotations

import os
from typing import Iterable

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

QtWidgets = pytest.importorskip("PyQt6.QtWidgets", reason="PyQt6 widgets required", exc_type=ImportError)


@pytest.fixture(scope="session")
def qapp() -> Iterable["QtWidgets.QApplication"]:
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app
