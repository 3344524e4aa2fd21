"""Tests for picker and drag-and-drop acquisition."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image
from vegsoil_analyzer.models.base import UserInputError
from vegsoil_analyzer.services.acquisition import (
    AcquisitionController,
    AcquisitionEvent,
    PreviewStore,
    SourceKind,
)
from vegsoil_analyzer.services.state import RequestStatus, SessionStore, submission_started


def _create_image(path: Path, size=(800, 600)) -> Path:
    Image.new("RGB", size, color=(40, 160, 60)).save(path)
    return path


def _controller(max_size: int = 400) -> AcquisitionController:
    return AcquisitionController(SessionStore(), PreviewStore(max_size=max_size))


def test_picker_and_drop_produce_identical_selection(tmp_path):
    path = _create_image(tmp_path / "field.png")

    picked = _controller().acquire(AcquisitionEvent.from_picker([path]))
    dropped = _controller().acquire(AcquisitionEvent.from_drop([path]))

    assert picked == dropped
    assert picked.data == path.read_bytes()
    assert picked.content_type == "image/png"
    assert picked.preview.thumbnail is not None


def test_empty_event_is_a_no_op():
    controller = _controller()
    before = controller._store.state

    assert controller.acquire(AcquisitionEvent.from_drop([])) is None
    assert controller._store.state is before


def test_only_first_file_is_used(tmp_path):
    first = _create_image(tmp_path / "first.png")
    second = _create_image(tmp_path / "second.png")

    image = _controller().acquire(AcquisitionEvent.from_drop([first, second]))

    assert image.name == "first.png"


def test_acquire_clears_result_and_resets_request(tmp_path):
    controller = _controller()
    store = controller._store
    controller.acquire(AcquisitionEvent.from_picker([_create_image(tmp_path / "a.png")]))
    pending, _ = submission_started(store.state)
    store.replace("submission_started", pending)

    controller.acquire(AcquisitionEvent.from_picker([_create_image(tmp_path / "b.png")]))

    assert store.state.request.status is RequestStatus.IDLE
    assert store.state.result is None
    assert store.state.image.name == "b.png"


def test_superseded_previews_are_released(tmp_path):
    controller = _controller()
    path = _create_image(tmp_path / "a.png")

    first = controller.acquire(AcquisitionEvent.from_picker([path]))
    for _ in range(5):
        latest = controller.acquire(AcquisitionEvent.from_drop([path]))

    assert controller.previews.active == 1
    assert not controller.previews.is_live(first.preview)
    assert controller.previews.is_live(latest.preview)


def test_preview_is_scaled_down(tmp_path):
    import io

    image = _controller(max_size=100).acquire(
        AcquisitionEvent.from_picker([_create_image(tmp_path / "big.png", size=(1000, 500))])
    )

    with Image.open(io.BytesIO(image.preview.thumbnail)) as thumb:
        assert thumb.size == (100, 50)


def test_non_image_files_are_accepted_without_preview(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not an image", encoding="utf-8")

    image = _controller().acquire(AcquisitionEvent.from_picker([path]))

    assert image.data == b"not an image"
    assert image.preview.thumbnail is None


def test_unreadable_file_raises_without_state_change(tmp_path):
    controller = _controller()
    before = controller._store.state

    with pytest.raises(UserInputError):
        controller.acquire(AcquisitionEvent.from_picker([tmp_path / "missing.png"]))

    assert controller._store.state is before
    assert controller.previews.active == 0


def test_event_constructors_normalise_paths():
    event = AcquisitionEvent.from_drop(["a.png"])
    assert event.kind is SourceKind.DROP
    assert event.first == Path("a.png")
