"""ViewModel layer for Qt widgets."""

from __future__ import annotations

from .main_view_model import MainViewModel
from .verifier_view_model import VerifierViewModel, should_offer_copy

__all__ = [
    "MainViewModel",
    "VerifierViewModel",
    "should_offer_copy",
]
