"""Tests for the submission controller request lifecycle."""

from __future__ import annotations

from pathlib import Path

from PIL import Image
from vegsoil_analyzer.config import AnalysisMode, AppConfig
from vegsoil_analyzer.models.base import SoilResult, TransportError, VegetationResult
from vegsoil_analyzer.services.acquisition import AcquisitionController, AcquisitionEvent
from vegsoil_analyzer.services.state import RequestStatus, SessionState, SessionStore, mode_switched
from vegsoil_analyzer.services.submission import (
    FAILURE_NOTICE,
    NO_IMAGE_NOTICE,
    SubmissionController,
)


class DummyClient:
    def __init__(self, payload=None, error: Exception | None = None) -> None:
        self.config = AppConfig()
        self.payload = payload if payload is not None else {}
        self.error = error
        self.calls: list[dict[str, object]] = []

    def predict(self, mode, *, filename, data, content_type=None):
        self.calls.append({"mode": mode, "filename": filename, "data": data})
        if self.error is not None:
            raise self.error
        return self.payload


class Harness:
    def __init__(self, client: DummyClient, *, deferred: bool = False, config=None) -> None:
        self.store = SessionStore(SessionState())
        self.notices = []
        self.jobs = []
        self.acquisition = AcquisitionController(self.store)
        self.controller = SubmissionController(
            self.store,
            client,
            config=config,
            notifier=self.notices.append,
            dispatcher=self.jobs.append if deferred else None,
        )

    def select(self, path: Path) -> None:
        self.acquisition.acquire(AcquisitionEvent.from_picker([path]))


def _image(tmp_path: Path, name: str = "field.png") -> Path:
    path = tmp_path / name
    Image.new("RGB", (8, 8), color=(90, 140, 30)).save(path)
    return path


def test_submit_without_image_notifies_and_skips_network():
    client = DummyClient()
    harness = Harness(client)
    before = harness.store.state

    assert harness.controller.submit() is None

    assert harness.notices == [NO_IMAGE_NOTICE]
    assert harness.store.state is before
    assert client.calls == []


def test_submit_settles_vegetation_result(tmp_path):
    client = DummyClient({"coverage_pct": 42.5, "segments": 7, "processingTime": 1.23})
    harness = Harness(client)
    harness.select(_image(tmp_path))

    job = harness.controller.submit()

    state = harness.store.state
    assert job is not None
    assert state.request.status is RequestStatus.SETTLED
    assert state.result.mode is AnalysisMode.VEGETATION
    assert state.result.shape == VegetationResult(42.5, 7, 1.23, None)
    assert client.calls[0]["filename"] == "field.png"
    assert client.calls[0]["data"] == (tmp_path / "field.png").read_bytes()


def test_submit_uses_mode_active_at_dispatch(tmp_path):
    client = DummyClient({"boxes": [{"label": "loam", "conf": 0.5}]})
    harness = Harness(client)
    harness.select(_image(tmp_path))
    harness.store.apply(mode_switched, AnalysisMode.SOIL)

    harness.controller.submit()

    assert client.calls[0]["mode"] is AnalysisMode.SOIL
    assert isinstance(harness.store.state.result.shape, SoilResult)


def test_double_submit_while_pending_issues_one_request(tmp_path):
    client = DummyClient({"segments": 1})
    harness = Harness(client, deferred=True)
    harness.select(_image(tmp_path))

    first = harness.controller.submit()
    second = harness.controller.submit()

    assert first is not None
    assert second is None
    assert harness.store.state.request.pending
    assert len(harness.jobs) == 1

    harness.controller.run(harness.jobs[0])
    assert len(client.calls) == 1
    assert harness.store.state.request.status is RequestStatus.SETTLED


def test_transport_failure_marks_failed_and_notifies(tmp_path):
    client = DummyClient(error=TransportError("connection refused"))
    harness = Harness(client)
    harness.select(_image(tmp_path))

    harness.controller.submit()

    state = harness.store.state
    assert state.request.status is RequestStatus.FAILED
    assert state.request.reason == "connection refused"
    assert state.result is None
    assert state.image is not None
    assert harness.notices == [FAILURE_NOTICE]


def test_failed_request_can_be_retried(tmp_path):
    client = DummyClient(error=TransportError("down"))
    harness = Harness(client)
    harness.select(_image(tmp_path))
    harness.controller.submit()

    client.error = None
    client.payload = {"segments": 2}
    harness.controller.submit()

    assert len(client.calls) == 2
    assert harness.store.state.request.status is RequestStatus.SETTLED


def test_response_for_superseded_image_is_discarded(tmp_path):
    client = DummyClient({"segments": 3})
    harness = Harness(client, deferred=True)
    harness.select(_image(tmp_path, "old.png"))
    harness.controller.submit()
    old_job = harness.jobs[0]

    harness.select(_image(tmp_path, "new.png"))
    result = harness.controller.execute(old_job)

    assert harness.controller.resolve(old_job, result) is False
    state = harness.store.state
    assert state.request.status is RequestStatus.IDLE
    assert state.result is None
    assert state.image.name == "new.png"


def test_stale_failure_is_discarded_silently(tmp_path):
    harness = Harness(DummyClient(), deferred=True)
    harness.select(_image(tmp_path, "old.png"))
    harness.controller.submit()
    harness.select(_image(tmp_path, "new.png"))

    assert harness.controller.reject(harness.jobs[0], TransportError("late")) is False
    assert harness.notices == []
    assert harness.store.state.request.status is RequestStatus.IDLE


def test_stale_response_lands_when_suppression_disabled(tmp_path):
    config = AppConfig(discard_stale_responses=False)
    harness = Harness(DummyClient({"segments": 3}), deferred=True, config=config)
    harness.select(_image(tmp_path, "old.png"))
    harness.controller.submit()
    job = harness.jobs[0]
    harness.select(_image(tmp_path, "new.png"))

    assert harness.controller.resolve(job, harness.controller.execute(job)) is True
    assert harness.store.state.request.status is RequestStatus.SETTLED


def test_unexpected_error_fails_request_inline(tmp_path):
    client = DummyClient(error=RuntimeError("parser exploded"))
    harness = Harness(client)
    harness.select(_image(tmp_path))

    harness.controller.submit()

    state = harness.store.state
    assert state.request.status is RequestStatus.FAILED
    assert state.request.reason == "parser exploded"
    assert harness.notices == [FAILURE_NOTICE]

    client.error = None
    assert harness.controller.submit() is not None
    assert harness.store.state.request.status is RequestStatus.SETTLED
