"""Persistence helpers for user configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from .config import AppConfig

logger = logging.getLogger(__name__)

API_URL_ENV = "VEGSOIL_API_URL"


class SettingsStore:
    """Load and save application settings to a well-known path.

    The backend address can be overridden per process through the
    ``VEGSOIL_API_URL`` environment variable without touching the saved file.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AppConfig:
        config = self._load_file()
        override = environment_base_url()
        if override is not None:
            logger.debug("Using %s=%s from the environment", API_URL_ENV, override)
            config = config.model_copy(update={"api_base_url": override})
        return config

    def save(self, config: AppConfig) -> None:
        override = environment_base_url()
        if override is not None and config.api_base_url == override:
            config = config.model_copy(
                update={"api_base_url": self._load_file().api_base_url}
            )
        config.save(self._path)

    def _load_file(self) -> AppConfig:
        if not self._path.exists():
            return AppConfig()
        return AppConfig.load(self._path)


def environment_base_url() -> str | None:
    """Return the normalised ``VEGSOIL_API_URL`` override, if one is set."""
    override = os.getenv(API_URL_ENV)
    if not override:
        return None
    try:
        return AppConfig(api_base_url=override).api_base_url
    except ValidationError as exc:
        raise ValueError(f"Invalid {API_URL_ENV}={override!r}: {exc}") from exc


def default_settings_path() -> Path:
    if os.name == "nt":
        base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    else:
        base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base.expanduser() / "vegsoil_analyzer" / "settings.yaml"
