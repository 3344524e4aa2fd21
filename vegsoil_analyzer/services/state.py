"""Finite-state store for the current image, mode and request lifecycle.

State is immutable. Every user or network event is applied by a pure reducer
that returns the next :class:`SessionState`; :class:`SessionStore` owns the
current value and publishes each change to its subscribers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..config import AnalysisMode
from ..models.base import PredictionResult

if TYPE_CHECKING:
    from .acquisition import SelectedImage

logger = logging.getLogger(__name__)


class RequestStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SETTLED = "settled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class RequestState:
    status: RequestStatus = RequestStatus.IDLE
    request_id: int | None = None
    reason: str | None = None

    @property
    def pending(self) -> bool:
        return self.status is RequestStatus.PENDING


IDLE = RequestState()


@dataclass(frozen=True, slots=True)
class SubmissionTicket:
    """Identifies one dispatched request and the image generation it used."""

    request_id: int
    generation: int
    mode: AnalysisMode


@dataclass(frozen=True, slots=True)
class SessionState:
    mode: AnalysisMode = AnalysisMode.VEGETATION
    image: SelectedImage | None = None
    request: RequestState = field(default=IDLE)
    result: PredictionResult | None = None
    generation: int = 0
    last_request_id: int = 0


# ----- Reducers --------------------------------------------------------------


def image_acquired(state: SessionState, image: SelectedImage) -> SessionState:
    return replace(
        state,
        image=image,
        request=IDLE,
        result=None,
        generation=state.generation + 1,
    )


def mode_switched(
    state: SessionState, mode: AnalysisMode, *, clear_result: bool = False
) -> SessionState:
    if not clear_result:
        return replace(state, mode=mode)
    request = state.request if state.request.pending else IDLE
    return replace(state, mode=mode, result=None, request=request)


def submission_started(state: SessionState) -> tuple[SessionState, SubmissionTicket]:
    request_id = state.last_request_id + 1
    ticket = SubmissionTicket(
        request_id=request_id, generation=state.generation, mode=state.mode
    )
    next_state = replace(
        state,
        request=RequestState(RequestStatus.PENDING, request_id=request_id),
        result=None,
        last_request_id=request_id,
    )
    return next_state, ticket


def is_current(state: SessionState, ticket: SubmissionTicket) -> bool:
    """True when ``ticket`` is still the pending request for the current image."""
    return (
        ticket.generation == state.generation
        and state.request.pending
        and state.request.request_id == ticket.request_id
    )


def _accepts(state: SessionState, ticket: SubmissionTicket, discard_stale: bool) -> bool:
    if is_current(state, ticket):
        return True
    if discard_stale:
        return False
    # Without stale suppression only the most recently dispatched request may land.
    return ticket.request_id == state.last_request_id


def submission_settled(
    state: SessionState,
    ticket: SubmissionTicket,
    result: PredictionResult,
    *,
    discard_stale: bool = True,
) -> SessionState:
    if not _accepts(state, ticket, discard_stale):
        return state
    return replace(
        state,
        request=RequestState(RequestStatus.SETTLED, request_id=ticket.request_id),
        result=result,
    )


def submission_failed(
    state: SessionState,
    ticket: SubmissionTicket,
    reason: str,
    *,
    discard_stale: bool = True,
) -> SessionState:
    if not _accepts(state, ticket, discard_stale):
        return state
    return replace(
        state,
        request=RequestState(RequestStatus.FAILED, request_id=ticket.request_id, reason=reason),
        result=None,
    )


# ----- Store -----------------------------------------------------------------

Listener = Callable[[SessionState], None]


class SessionStore:
    """Holds the current :class:`SessionState` and notifies listeners on change."""

    def __init__(self, initial: SessionState | None = None) -> None:
        self._state = initial or SessionState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable removes it again."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def apply(self, reducer: Callable[..., SessionState], *args: Any, **kwargs: Any) -> bool:
        """Run ``reducer`` on the current state; returns True if the state changed."""
        previous = self._state
        next_state = reducer(previous, *args, **kwargs)
        return self._commit(reducer.__name__, previous, next_state)

    def replace(self, name: str, next_state: SessionState) -> bool:
        return self._commit(name, self._state, next_state)

    def _commit(self, name: str, previous: SessionState, next_state: SessionState) -> bool:
        if next_state is previous:
            return False
        self._state = next_state
        logger.debug(
            "%s: %s -> %s (generation %d)",
            name,
            previous.request.status.value,
            next_state.request.status.value,
            next_state.generation,
        )
        for listener in list(self._listeners):
            listener(next_state)
        return True
