"""HTTP client for the remote prediction backend."""

from __future__ import annotations

import logging
from typing import Any

import requests
from requests import Response, Session

from ..config import AnalysisMode, AppConfig
from .base import TransportError
from .modes import policy_for

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class PredictionClient:
    """Posts image bytes to the mode-specific ``/predict`` endpoint."""

    def __init__(self, config: AppConfig | None = None, session: Session | None = None) -> None:
        self._config = config or AppConfig()
        self._session = session or requests.Session()

    @property
    def config(self) -> AppConfig:
        return self._config

    def endpoint_for(self, mode: AnalysisMode) -> str:
        return f"{self._config.api_base_url}{policy_for(mode).endpoint}"

    def predict(
        self,
        mode: AnalysisMode,
        *,
        filename: str,
        data: bytes,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        """Submit one image and return the decoded JSON object."""
        url = self.endpoint_for(mode)
        files = {
            self._config.file_field: (filename, data, content_type or DEFAULT_CONTENT_TYPE),
        }
        logger.info("Submitting %s (%d bytes) to %s", filename, len(data), url)
        response = self._session_post(url, files)
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"Backend returned malformed JSON from {url}") from exc
        if not isinstance(payload, dict):
            raise TransportError(
                f"Backend returned {type(payload).__name__} instead of an object from {url}"
            )
        return payload

    def close(self) -> None:
        self._session.close()

    # ----- HTTP helpers ----------------------------------------------------

    def _session_post(self, url: str, files: dict[str, tuple[str, bytes, str]]) -> Response:
        timeout = self._config.request_timeout
        try:
            response = self._session.post(url, files=files, timeout=timeout)
        except requests.exceptions.Timeout as exc:
            raise TransportError(f"Request to {url} timed out after {timeout}s") from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"Failed to contact prediction backend: {exc}") from exc
        if response.status_code >= 400:
            raise TransportError(
                f"Prediction backend returned HTTP {response.status_code}: {response.text}"
            )
        return response
