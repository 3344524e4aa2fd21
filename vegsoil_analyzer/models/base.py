"""Result shapes and error types shared by the analysis modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from ..config import AnalysisMode


@dataclass(slots=True)
class VegetationResult:
    """Coverage statistics returned by the vegetation endpoint."""

    coverage_percent: float | None = None
    segment_count: int | str | None = None
    processing_time_seconds: float | str | None = None
    annotated_image: str | None = None


@dataclass(slots=True)
class SoilBox:
    """A single soil classification with its confidence in ``[0, 1]``."""

    label: str | None = None
    confidence: float | None = None


@dataclass(slots=True)
class SoilResult:
    """Ordered soil classifications plus an optional overlay image."""

    boxes: list[SoilBox] = field(default_factory=list)
    overlay_image: str | None = None

    @property
    def primary_box(self) -> SoilBox | None:
        """Only the first box is surfaced in summaries; the rest are kept as-is."""
        return self.boxes[0] if self.boxes else None


ResultShape = Union[VegetationResult, SoilResult]


@dataclass(slots=True)
class PredictionResult:
    """A parsed backend reply together with the mode it was requested under."""

    mode: AnalysisMode
    payload: dict[str, Any]
    shape: ResultShape


@dataclass(frozen=True, slots=True)
class SummaryLine:
    """One ``label: value`` row of the results summary panel."""

    label: str
    value: str

    @property
    def text(self) -> str:
        return f"{self.label}: {self.value}"


class AnalysisError(RuntimeError):
    """Base class for failures surfaced while analysing an image."""


class UserInputError(AnalysisError):
    """Raised when the user has not provided what an action needs."""


class TransportError(AnalysisError):
    """Raised when the backend cannot be reached or replies with garbage."""
