"""Projection of the session state onto what the presentation layer shows."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import AnalysisMode
from ..models.base import SummaryLine
from ..models.modes import policy_for
from ..utils.images import decode_base64_image
from .acquisition import PreviewHandle
from .state import RequestStatus, SessionState

SUBMIT_LABEL = "Run Prediction"
BUSY_LABEL = "Processing..."


@dataclass(frozen=True, slots=True)
class ResultView:
    mode: AnalysisMode
    status: RequestStatus
    input_preview: PreviewHandle | None
    output_image: bytes | None
    # None hides the results panel; an empty tuple shows it without rows.
    summary: tuple[SummaryLine, ...] | None
    submit_enabled: bool
    submit_label: str
    failure_reason: str | None = None

    @property
    def summary_text(self) -> list[str]:
        return [line.text for line in self.summary or ()]


def render(state: SessionState) -> ResultView:
    """Build the view for ``state``.

    The summary and output image are read through the policy of the mode that
    is active now, not the one the request was issued under.
    """
    output_image: bytes | None = None
    summary: tuple[SummaryLine, ...] | None = None
    if state.result is not None:
        policy = policy_for(state.mode)
        shape = policy.parse(state.result.payload)
        output_image = decode_base64_image(policy.output_image(shape))
        summary = tuple(policy.summarize(shape))

    busy = state.request.pending
    return ResultView(
        mode=state.mode,
        status=state.request.status,
        input_preview=state.image.preview if state.image is not None else None,
        output_image=output_image,
        summary=summary,
        submit_enabled=not busy,
        submit_label=BUSY_LABEL if busy else SUBMIT_LABEL,
        failure_reason=state.request.reason,
    )
