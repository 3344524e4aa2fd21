"""Service layer for acquiring images and running predictions."""

from .acquisition import AcquisitionController, AcquisitionEvent, PreviewStore, SelectedImage
from .rendering import ResultView, render
from .session import AnalysisSession
from .state import RequestStatus, SessionState, SessionStore
from .submission import Notice, SubmissionController, SubmissionJob

__all__ = [
    "AcquisitionController",
    "AcquisitionEvent",
    "AnalysisSession",
    "Notice",
    "PreviewStore",
    "RequestStatus",
    "ResultView",
    "SelectedImage",
    "SessionState",
    "SessionStore",
    "SubmissionController",
    "SubmissionJob",
    "render",
]
