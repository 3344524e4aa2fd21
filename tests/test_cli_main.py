"""Tests for the CLI entry point."""

from __future__ import annotations

import json

import pytest
from PIL import Image
from vegsoil_analyzer.__main__ import main as cli_main
from vegsoil_analyzer.config import AppConfig
from vegsoil_analyzer.services.session import AnalysisSession
from vegsoil_analyzer.settings_store import SettingsStore


class DummyStore:
    def load(self) -> AppConfig:
        return AppConfig()


class DummyResponse:
    def __init__(self, payload, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = json.dumps(payload)

    def json(self):
        return self._payload


class FakeHttpSession:
    def __init__(self, response: DummyResponse) -> None:
        self.response = response
        self.urls: list[str] = []

    def post(self, url, **kwargs):
        self.urls.append(url)
        return self.response

    def close(self) -> None:
        return None


@pytest.fixture
def fake_backend(monkeypatch):
    http = FakeHttpSession(DummyResponse({"coverage_pct": 42.5, "segments": 7, "processingTime": 1.23}))
    monkeypatch.setattr("vegsoil_analyzer.__main__.SettingsStore", DummyStore)
    monkeypatch.setattr(
        "vegsoil_analyzer.__main__.AnalysisSession",
        lambda config: AnalysisSession(config, http_session=http),
    )
    return http


def _image(tmp_path):
    path = tmp_path / "field.png"
    Image.new("RGB", (4, 4), color=(10, 200, 10)).save(path)
    return path


def test_cli_lists_modes(capsys):
    cli_main(["--list-modes"])

    payload = json.loads(capsys.readouterr().out)
    assert {item["mode"]: item["endpoint"] for item in payload} == {
        "vegetation": "/predict/vegetation",
        "soil": "/predict/soil",
    }


def test_cli_requires_input_in_headless_mode():
    with pytest.raises(SystemExit):
        cli_main(["--headless"])


def test_cli_runs_headless_prediction(fake_backend, tmp_path, capsys):
    image_path = _image(tmp_path)

    cli_main(["--headless", "--input", str(image_path), "--base-url", "http://api:8000/"])

    payload = json.loads(capsys.readouterr().out)
    assert fake_backend.urls == ["http://api:8000/predict/vegetation"]
    assert payload["status"] == "settled"
    assert payload["mode"] == "vegetation"
    assert payload["summary"] == ["Coverage: 42.50%", "Segments: 7", "Processing Time: 1.23s"]
    assert payload["has_output_image"] is False
    assert payload["error"] is None


def test_cli_mode_override(fake_backend, tmp_path, capsys):
    cli_main(["--input", str(_image(tmp_path)), "--mode", "soil"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["mode"] == "soil"
    assert payload["summary"] == []
    assert fake_backend.urls[0].endswith("/predict/soil")


def test_cli_exits_non_zero_on_failure(fake_backend, tmp_path, capsys):
    fake_backend.response = DummyResponse({"detail": "boom"}, status_code=500)

    with pytest.raises(SystemExit) as excinfo:
        cli_main(["--headless", "--input", str(_image(tmp_path))])

    assert excinfo.value.code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "failed"
    assert "HTTP 500" in payload["error"]


def test_cli_rejects_missing_file(fake_backend, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli_main(["--headless", "--input", str(tmp_path / "missing.png")])

    assert excinfo.value.code == 2
    assert fake_backend.urls == []


@pytest.mark.parametrize(
    "option",
    [["--timeout", "0.5"], ["--base-url", "backend:8000"]],
)
def test_cli_rejects_invalid_overrides(fake_backend, tmp_path, capsys, option):
    with pytest.raises(SystemExit) as excinfo:
        cli_main(["--headless", "--input", str(_image(tmp_path)), *option])

    assert excinfo.value.code == 2
    assert "Invalid option" in capsys.readouterr().err
    assert fake_backend.urls == []


def test_cli_rejects_invalid_environment_url(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("VEGSOIL_API_URL", "backend:8000")
    monkeypatch.setattr(
        "vegsoil_analyzer.__main__.SettingsStore",
        lambda: SettingsStore(path=tmp_path / "settings.yaml"),
    )

    with pytest.raises(SystemExit) as excinfo:
        cli_main(["--headless", "--input", str(_image(tmp_path))])

    assert excinfo.value.code == 2
    assert "VEGSOIL_API_URL" in capsys.readouterr().err
