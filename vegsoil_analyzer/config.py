"""Application-wide configuration models and persistence helpers."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator


class AnalysisMode(str, Enum):
    """Remote analysis capabilities a prediction can target."""

    VEGETATION = "vegetation"
    SOIL = "soil"


class AppConfig(BaseModel):
    """Validates and stores runtime settings for the application."""

    api_base_url: str = Field(
        default="http://127.0.0.1:8000",
        description="Base URL of the prediction backend.",
    )
    default_mode: AnalysisMode = Field(
        default=AnalysisMode.VEGETATION,
        description="Analysis mode selected when a session starts.",
    )
    request_timeout: float | None = Field(
        default=None,
        ge=1.0,
        le=600.0,
        description="Timeout (seconds) for prediction requests. None keeps the transport default.",
    )
    clear_result_on_mode_switch: bool = Field(
        default=False,
        description="When true, switching the analysis mode discards the displayed result.",
    )
    discard_stale_responses: bool = Field(
        default=True,
        description=(
            "Ignore responses that arrive after a newer image has been selected."
        ),
    )
    preview_max_size: int = Field(
        default=400,
        ge=32,
        le=4096,
        description="Longest edge (pixels) of the generated input preview.",
    )
    file_field: str = Field(
        default="file",
        min_length=1,
        description="Multipart field name carrying the image bytes.",
    )

    @model_validator(mode="after")
    def _normalise_base_url(self) -> AppConfig:
        base = self.api_base_url.strip()
        if not base:
            raise ValueError("API base URL must not be empty.")
        if "://" not in base:
            raise ValueError("API base URL must include a scheme such as http://127.0.0.1:8000.")
        self.api_base_url = base.rstrip("/")
        return self

    def as_dict(self) -> dict[str, Any]:
        """Serialize the configuration to primitive Python types."""
        return self.model_dump(mode="json")

    @classmethod
    def load(cls, path: Path) -> AppConfig:
        """Load configuration from a YAML or JSON file."""
        data = _read_config_file(path)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration file at {path}: {exc}") from exc

    def save(self, path: Path) -> None:
        """Persist configuration to a YAML file."""
        _write_config_file(path, self.as_dict())


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        return yaml.safe_load(text) or {}
    return json.loads(text)


def _write_config_file(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in {".yaml", ".yml"}:
        yaml_text = yaml.safe_dump(
            data,
            allow_unicode=False,
            sort_keys=False,
        )
        path.write_text(yaml_text, encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
