"""Request lifecycle for submitting the selected image to the backend."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..config import AppConfig
from ..models.base import PredictionResult, TransportError
from ..models.modes import policy_for
from ..models.remote import PredictionClient
from .acquisition import SelectedImage
from .state import (
    SessionStore,
    SubmissionTicket,
    submission_failed,
    submission_settled,
    submission_started,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Notice:
    """A message the user should see, e.g. in a message box."""

    title: str
    message: str
    error: bool = False


NO_IMAGE_NOTICE = Notice("No image", "Please upload an image first!")
FAILURE_NOTICE = Notice("Prediction failed", "Prediction failed. Check backend logs.", error=True)


@dataclass(frozen=True, slots=True)
class SubmissionJob:
    ticket: SubmissionTicket
    image: SelectedImage = field(repr=False)


Notifier = Callable[[Notice], None]
Dispatcher = Callable[[SubmissionJob], None]


def _log_notice(notice: Notice) -> None:
    level = logging.ERROR if notice.error else logging.INFO
    logger.log(level, "%s: %s", notice.title, notice.message)


class SubmissionController:
    """Dispatches one prediction request at a time and settles its outcome.

    ``dispatcher`` decides where :meth:`execute` runs. The default runs the job
    inline; the GUI hands jobs to a worker thread and reports back through
    :meth:`resolve` and :meth:`reject` on the GUI thread.
    """

    def __init__(
        self,
        store: SessionStore,
        client: PredictionClient,
        *,
        config: AppConfig | None = None,
        notifier: Notifier | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self._store = store
        self.client = client
        self.config = config or client.config
        self._notify = notifier or _log_notice
        self._dispatch = dispatcher or self.run

    def submit(self) -> SubmissionJob | None:
        state = self._store.state
        if state.image is None:
            self._notify(NO_IMAGE_NOTICE)
            return None
        if state.request.pending:
            logger.debug("Request %s still pending; ignoring submit", state.request.request_id)
            return None

        next_state, ticket = submission_started(state)
        self._store.replace("submission_started", next_state)
        job = SubmissionJob(ticket=ticket, image=state.image)
        logger.info(
            "Dispatching request %d (%s) for %s",
            ticket.request_id,
            ticket.mode.value,
            job.image.name,
        )
        self._dispatch(job)
        return job

    def execute(self, job: SubmissionJob) -> PredictionResult:
        """Perform the network call for ``job``; safe to run off the GUI thread."""
        payload = self.client.predict(
            job.ticket.mode,
            filename=job.image.name,
            data=job.image.data,
            content_type=job.image.content_type,
        )
        shape = policy_for(job.ticket.mode).parse(payload)
        return PredictionResult(mode=job.ticket.mode, payload=payload, shape=shape)

    def run(self, job: SubmissionJob) -> None:
        """Execute ``job`` inline; every failure ends the request as Failed."""
        try:
            result = self.execute(job)
        except TransportError as exc:
            self.reject(job, exc)
        except Exception as exc:
            logger.exception("Unexpected error while running request %d", job.ticket.request_id)
            self.reject(job, exc)
        else:
            self.resolve(job, result)

    def resolve(self, job: SubmissionJob, result: PredictionResult) -> bool:
        applied = self._store.apply(
            submission_settled,
            job.ticket,
            result,
            discard_stale=self.config.discard_stale_responses,
        )
        if not applied:
            logger.info("Discarding stale response for request %d", job.ticket.request_id)
        return applied

    def reject(self, job: SubmissionJob, error: BaseException) -> bool:
        logger.warning("Prediction request %d failed: %s", job.ticket.request_id, error)
        applied = self._store.apply(
            submission_failed,
            job.ticket,
            str(error),
            discard_stale=self.config.discard_stale_responses,
        )
        if applied:
            self._notify(FAILURE_NOTICE)
        else:
            logger.info("Discarding stale failure for request %d", job.ticket.request_id)
        return applied
