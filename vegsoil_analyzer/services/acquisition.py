"""Image acquisition from the file picker or a drag-and-drop gesture."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..models.base import UserInputError
from ..utils.images import make_thumbnail
from ..utils.paths import guess_content_type
from .state import SessionStore, image_acquired

logger = logging.getLogger(__name__)


class SourceKind(str, Enum):
    PICKER = "picker"
    DROP = "drop"


@dataclass(frozen=True, slots=True)
class AcquisitionEvent:
    """Files delivered by one picker selection or drop; only the first is used."""

    kind: SourceKind
    paths: tuple[Path, ...] = ()

    @classmethod
    def from_picker(cls, paths: Iterable[Path | str]) -> AcquisitionEvent:
        return cls(SourceKind.PICKER, tuple(Path(path) for path in paths))

    @classmethod
    def from_drop(cls, paths: Iterable[Path | str]) -> AcquisitionEvent:
        return cls(SourceKind.DROP, tuple(Path(path) for path in paths))

    @property
    def first(self) -> Path | None:
        return self.paths[0] if self.paths else None


@dataclass(frozen=True, slots=True)
class PreviewHandle:
    """Display-only reference to a thumbnail of the selected image."""

    token: int = field(compare=False)
    name: str
    thumbnail: bytes | None = field(default=None, repr=False)


class PreviewStore:
    """Issues preview handles and tracks which ones are still live."""

    def __init__(self, max_size: int = 400) -> None:
        self.max_size = max_size
        self._tokens = itertools.count(1)
        self._live: dict[int, PreviewHandle] = {}

    @property
    def active(self) -> int:
        return len(self._live)

    def create(self, name: str, data: bytes) -> PreviewHandle:
        handle = PreviewHandle(
            token=next(self._tokens),
            name=name,
            thumbnail=make_thumbnail(data, self.max_size),
        )
        self._live[handle.token] = handle
        return handle

    def release(self, handle: PreviewHandle | None) -> None:
        if handle is not None:
            self._live.pop(handle.token, None)

    def is_live(self, handle: PreviewHandle) -> bool:
        return handle.token in self._live


@dataclass(frozen=True, slots=True)
class SelectedImage:
    name: str
    data: bytes = field(repr=False)
    content_type: str | None
    preview: PreviewHandle

    @property
    def size(self) -> int:
        return len(self.data)


class AcquisitionController:
    """Normalises picker and drop events into the session's selected image."""

    def __init__(self, store: SessionStore, previews: PreviewStore | None = None) -> None:
        self._store = store
        self._previews = previews or PreviewStore()

    @property
    def previews(self) -> PreviewStore:
        return self._previews

    def acquire(self, event: AcquisitionEvent) -> SelectedImage | None:
        """Replace the selected image with the first file in ``event``.

        An event without files is ignored. Any displayed result is cleared and
        the request lifecycle returns to idle.
        """
        path = event.first
        if path is None:
            logger.debug("Ignoring %s event without files", event.kind.value)
            return None

        try:
            data = path.read_bytes()
        except OSError as exc:
            raise UserInputError(f"Unable to read {path}: {exc}") from exc

        preview = self._previews.create(path.name, data)
        image = SelectedImage(
            name=path.name,
            data=data,
            content_type=guess_content_type(path),
            preview=preview,
        )
        previous = self._store.state.image
        self._store.apply(image_acquired, image)
        if previous is not None:
            self._previews.release(previous.preview)
        logger.info("Selected %s via %s (%d bytes)", image.name, event.kind.value, image.size)
        return image
