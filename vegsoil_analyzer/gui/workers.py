"""Qt worker objects used to run predictions off the main thread."""

from __future__ import annotations

from PySide6.QtCore import QObject, QRunnable, Signal

from ..services.submission import SubmissionController, SubmissionJob


class WorkerSignals(QObject):
    finished = Signal(object, object)
    error = Signal(object, object)


class PredictionWorker(QRunnable):
    """Runs the backend request for one submission on a pool thread."""

    def __init__(self, controller: SubmissionController, job: SubmissionJob) -> None:
        super().__init__()
        self.controller = controller
        self.job = job
        self.signals = WorkerSignals()

    def run(self) -> None:
        try:
            result = self.controller.execute(self.job)
        except Exception as exc:  # pragma: no cover - safety net for GUI worker
            self.signals.error.emit(self.job, exc)
        else:
            self.signals.finished.emit(self.job, result)
