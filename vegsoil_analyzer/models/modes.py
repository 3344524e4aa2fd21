"""Closed lookup table describing each analysis mode.

Every mode maps to the backend path it is served from, a tolerant parser for
the JSON reply, a summary formatter and an accessor for the encoded output
image. Adding a mode means adding an :class:`AnalysisMode` member and one
entry to :data:`MODE_POLICIES`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..config import AnalysisMode
from .base import ResultShape, SoilBox, SoilResult, SummaryLine, VegetationResult


@dataclass(frozen=True, slots=True)
class ModePolicy:
    mode: AnalysisMode
    display_name: str
    endpoint: str
    parse: Callable[[Mapping[str, Any]], ResultShape]
    summarize: Callable[[Any], list[SummaryLine]]
    output_image: Callable[[Any], str | None]


def _optional_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


# Text values are kept verbatim so the summary shows what the backend sent.
def _int_or_text(value: Any) -> int | str | None:
    return value if isinstance(value, str) else _optional_int(value)


def _float_or_text(value: Any) -> float | str | None:
    return value if isinstance(value, str) else _optional_float(value)


def _text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return format_number(value)


def format_number(value: float | int | str) -> str:
    """Render a number the way a browser would stringify it (``2.0`` -> ``2``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ----- Vegetation ------------------------------------------------------------


def parse_vegetation(payload: Mapping[str, Any]) -> VegetationResult:
    return VegetationResult(
        coverage_percent=_optional_float(payload.get("coverage_pct")),
        segment_count=_int_or_text(payload.get("segments")),
        processing_time_seconds=_float_or_text(payload.get("processingTime")),
        annotated_image=_optional_str(payload.get("annotated_png_b64")),
    )


def summarize_vegetation(result: VegetationResult) -> list[SummaryLine]:
    coverage = result.coverage_percent
    segments = result.segment_count
    elapsed = result.processing_time_seconds
    return [
        SummaryLine("Coverage", f"{coverage:.2f}%" if coverage is not None else ""),
        SummaryLine("Segments", str(segments) if segments is not None else ""),
        SummaryLine(
            "Processing Time", f"{format_number(elapsed)}s" if elapsed is not None else ""
        ),
    ]


# ----- Soil ------------------------------------------------------------------


def parse_soil(payload: Mapping[str, Any]) -> SoilResult:
    raw_boxes = payload.get("boxes")
    boxes: list[SoilBox] = []
    if isinstance(raw_boxes, (list, tuple)):
        for item in raw_boxes:
            if not isinstance(item, Mapping):
                continue
            boxes.append(
                SoilBox(
                    label=_text(item.get("label")),
                    confidence=_optional_float(item.get("conf")),
                )
            )
    return SoilResult(
        boxes=boxes,
        overlay_image=_optional_str(payload.get("overlay_png_b64")),
    )


def summarize_soil(result: SoilResult) -> list[SummaryLine]:
    box = result.primary_box
    if box is None:
        return []
    confidence = f"{box.confidence * 100:.2f}%" if box.confidence is not None else ""
    return [
        SummaryLine("Label", box.label or ""),
        SummaryLine("Confidence", confidence),
    ]


MODE_POLICIES: dict[AnalysisMode, ModePolicy] = {
    AnalysisMode.VEGETATION: ModePolicy(
        mode=AnalysisMode.VEGETATION,
        display_name="Vegetation",
        endpoint="/predict/vegetation",
        parse=parse_vegetation,
        summarize=summarize_vegetation,
        output_image=lambda result: result.annotated_image,
    ),
    AnalysisMode.SOIL: ModePolicy(
        mode=AnalysisMode.SOIL,
        display_name="Soil",
        endpoint="/predict/soil",
        parse=parse_soil,
        summarize=summarize_soil,
        output_image=lambda result: result.overlay_image,
    ),
}


def policy_for(mode: AnalysisMode | str) -> ModePolicy:
    """Return the policy registered for ``mode``."""
    try:
        return MODE_POLICIES[AnalysisMode(mode)]
    except (KeyError, ValueError) as exc:
        available = ", ".join(sorted(item.value for item in MODE_POLICIES))
        raise KeyError(f"Unknown analysis mode '{mode}'. Available: {available}") from exc
