"""Facade wiring the store, controllers and backend client together."""

from __future__ import annotations

import logging

from requests import Session

from ..config import AnalysisMode, AppConfig
from ..models.remote import PredictionClient
from .acquisition import AcquisitionController, AcquisitionEvent, PreviewStore, SelectedImage
from .rendering import ResultView, render
from .state import SessionState, SessionStore, mode_switched
from .submission import Dispatcher, Notifier, SubmissionController, SubmissionJob

logger = logging.getLogger(__name__)


class AnalysisSession:
    """High-level orchestration for one interactive analysis session."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        notifier: Notifier | None = None,
        dispatcher: Dispatcher | None = None,
        http_session: Session | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.store = SessionStore(SessionState(mode=self.config.default_mode))
        self.acquisition = AcquisitionController(
            self.store, PreviewStore(max_size=self.config.preview_max_size)
        )
        self.submission = SubmissionController(
            self.store,
            PredictionClient(self.config, session=http_session),
            config=self.config,
            notifier=notifier,
            dispatcher=dispatcher,
        )

    @property
    def state(self) -> SessionState:
        return self.store.state

    def acquire(self, event: AcquisitionEvent) -> SelectedImage | None:
        return self.acquisition.acquire(event)

    def select_mode(self, mode: AnalysisMode | str) -> None:
        mode = AnalysisMode(mode)
        if mode is self.store.state.mode:
            return
        self.store.apply(
            mode_switched, mode, clear_result=self.config.clear_result_on_mode_switch
        )
        logger.debug("Analysis mode set to %s", mode.value)

    def submit(self) -> SubmissionJob | None:
        return self.submission.submit()

    def view(self) -> ResultView:
        return render(self.store.state)

    def apply_config(self, config: AppConfig) -> None:
        """Swap in new settings; the selected image and result are kept."""
        old_client = self.submission.client
        self.config = config
        self.acquisition.previews.max_size = config.preview_max_size
        self.submission.client = PredictionClient(config)
        self.submission.config = config
        old_client.close()
        logger.info("Prediction backend set to %s", config.api_base_url)

    def close(self) -> None:
        self.submission.client.close()
