"""Pydantic schema for verifier configuration."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_CHUNK_SIZE = 8 * 1024
DEFAULT_COPY_MIN_LENGTH = 30
DEFAULT_TOAST_TIMEOUT_MS = 2000
DEFAULT_WINDOW_SIZE = (560, 640)


def _coerce_int(value: Any, default: int, *, minimum: int) -> int:
    try:
        coerced = int(value)
    except (TypeError, ValueError):
        return default
    return max(minimum, coerced)


class VerifierSettings(BaseModel):
    """Validated settings for the digest verifier."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    chunk_size: int = DEFAULT_CHUNK_SIZE
    copy_min_length: int = DEFAULT_COPY_MIN_LENGTH
    toast_timeout_ms: int = DEFAULT_TOAST_TIMEOUT_MS
    window_width: int = DEFAULT_WINDOW_SIZE[0]
    window_height: int = DEFAULT_WINDOW_SIZE[1]

    @field_validator("chunk_size", mode="before")
    @classmethod
    def _coerce_chunk_size(cls, value: Any) -> int:
        return _coerce_int(value, DEFAULT_CHUNK_SIZE, minimum=1)

    @field_validator("copy_min_length", mode="before")
    @classmethod
    def _coerce_copy_min_length(cls, value: Any) -> int:
        return _coerce_int(value, DEFAULT_COPY_MIN_LENGTH, minimum=0)

    @field_validator("toast_timeout_ms", mode="before")
    @classmethod
    def _coerce_toast_timeout(cls, value: Any) -> int:
        return _coerce_int(value, DEFAULT_TOAST_TIMEOUT_MS, minimum=0)

    @field_validator("window_width", mode="before")
    @classmethod
    def _coerce_window_width(cls, value: Any) -> int:
        return _coerce_int(value, DEFAULT_WINDOW_SIZE[0], minimum=200)

    @field_validator("window_height", mode="before")
    @classmethod
    def _coerce_window_height(cls, value: Any) -> int:
        return _coerce_int(value, DEFAULT_WINDOW_SIZE[1], minimum=200)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "VerifierSettings":
        if not isinstance(data, Mapping):
            data = {}
        return cls.model_validate(data)


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_COPY_MIN_LENGTH",
    "DEFAULT_TOAST_TIMEOUT_MS",
    "DEFAULT_WINDOW_SIZE",
    "VerifierSettings",
]
