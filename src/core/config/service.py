"""Service for loading verifier configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .paths import AppPaths
from .schema import VerifierSettings

logger = logging.getLogger(__name__)


class SettingsService:
    """Load and validate :class:`VerifierSettings` from ``config.yaml``."""

    def __init__(self, app_paths: AppPaths, *, filename: str = "config.yaml") -> None:
        self._app_paths = app_paths
        self._filename = filename

    @property
    def config_path(self) -> Path:
        """Path to the configuration file."""

        return self._app_paths.config_path(self._filename)

    def load(self) -> VerifierSettings:
        """Load the configuration from disk with graceful fallbacks."""

        path = self.config_path
        if not path.exists():
            return VerifierSettings()

        try:
            raw_text = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Unable to read settings from %s: %s", path, exc)
            return VerifierSettings()

        try:
            raw_data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            logger.warning("Invalid YAML in %s: %s", path, exc)
            return VerifierSettings()

        if raw_data is not None and not isinstance(raw_data, dict):
            logger.warning("Ignoring non-mapping settings payload in %s", path)
        return VerifierSettings.from_mapping(raw_data)


__all__ = ["SettingsService"]
