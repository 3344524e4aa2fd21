"""Busy indicator and status line shown under the predict button."""

from __future__ import annotations

from PySide6.QtWidgets import QLabel, QProgressBar, QVBoxLayout, QWidget

from ...services.state import RequestStatus

_STATUS_TEXT = {
    RequestStatus.IDLE: "Idle",
    RequestStatus.PENDING: "Waiting for the prediction backend…",
    RequestStatus.SETTLED: "Done",
    RequestStatus.FAILED: "Prediction failed",
}


class ProgressPanel(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self._progress = QProgressBar()
        self._progress.setRange(0, 1)
        self._progress.setValue(0)
        self._progress.setTextVisible(False)

        self._status = QLabel(_STATUS_TEXT[RequestStatus.IDLE])
        self._status.setWordWrap(True)

        layout.addWidget(self._progress)
        layout.addWidget(self._status)

    def show_status(self, status: RequestStatus) -> None:
        busy = status is RequestStatus.PENDING
        # A zero-width range switches the bar into its indeterminate animation.
        self._progress.setRange(0, 0 if busy else 1)
        self._progress.setValue(1 if status is RequestStatus.SETTLED else 0)
        self._status.setText(_STATUS_TEXT[status])
