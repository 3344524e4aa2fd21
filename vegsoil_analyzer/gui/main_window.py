"""Main Qt window implementing the user interface."""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path

from PySide6 import QtCore
from PySide6.QtCore import QThreadPool
from PySide6.QtGui import QCloseEvent, QGuiApplication
from PySide6.QtWidgets import (
    QApplication,
    QButtonGroup,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QRadioButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from ..config import AnalysisMode, AppConfig
from ..models.base import PredictionResult, UserInputError
from ..models.modes import policy_for
from ..services.acquisition import AcquisitionEvent
from ..services.rendering import ResultView
from ..services.session import AnalysisSession
from ..services.state import RequestStatus, SessionState
from ..services.submission import Notice, SubmissionJob
from ..settings_store import SettingsStore
from ..utils.paths import image_dialog_filter
from .widgets.drop_target import DropTargetWidget
from .widgets.image_panel import ImagePanel
from .widgets.progress_panel import ProgressPanel
from .widgets.settings_form import SettingsDialog
from .widgets.summary_panel import SummaryPanel
from .workers import PredictionWorker

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Primary application window."""

    def __init__(self, settings_store: SettingsStore | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Vegetation and Soil Analyzer")
        self.resize(1000, 760)

        self.settings_store = settings_store or SettingsStore()
        self.config: AppConfig = self._load_config()
        self.session = AnalysisSession(
            self.config,
            notifier=self._show_notice,
            dispatcher=self._dispatch,
        )
        self.thread_pool = QThreadPool()
        self._workers: dict[int, PredictionWorker] = {}
        self._cursor_busy = False

        self._build_ui()
        self._build_menus()
        self.session.store.subscribe(self._on_state_changed)
        self._on_state_changed(self.session.state)

    def _load_config(self) -> AppConfig:
        try:
            return self.settings_store.load()
        except ValueError as exc:
            logger.warning("Falling back to default settings: %s", exc)
            QMessageBox.warning(
                self, "Invalid settings", f"{exc}\n\nDefault settings will be used."
            )
            return AppConfig()

    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(16)
        self.setCentralWidget(central)

        title = QLabel("<h2>Vegetation and Soil Analyzer</h2>")
        title.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        self.info_label = QLabel("<b>Upload an image and get prediction</b>")
        self.info_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.info_label)

        mode_row = QHBoxLayout()
        mode_row.addStretch()
        self.mode_group = QButtonGroup(self)
        self.mode_buttons: dict[AnalysisMode, QRadioButton] = {}
        for mode in AnalysisMode:
            button = QRadioButton(policy_for(mode).display_name)
            button.toggled.connect(partial(self._on_mode_toggled, mode))
            self.mode_group.addButton(button)
            self.mode_buttons[mode] = button
            mode_row.addWidget(button)
        mode_row.addStretch()
        layout.addLayout(mode_row)

        self.drop_target = DropTargetWidget()
        self.drop_target.files_dropped.connect(self._handle_dropped_paths)
        self.drop_target.clicked.connect(self._choose_file)
        layout.addWidget(self.drop_target)

        button_row = QHBoxLayout()
        self.predict_btn = QPushButton("Run Prediction")
        self.predict_btn.setMinimumWidth(180)
        self.predict_btn.clicked.connect(self._run_prediction)
        button_row.addStretch()
        button_row.addWidget(self.predict_btn)
        button_row.addStretch()
        layout.addLayout(button_row)

        self.progress_panel = ProgressPanel()
        layout.addWidget(self.progress_panel)

        images_row = QHBoxLayout()
        images_row.setSpacing(40)
        self.input_panel = ImagePanel("Input Image", self.config.preview_max_size)
        self.output_panel = ImagePanel("Output Image", self.config.preview_max_size)
        images_row.addStretch()
        images_row.addWidget(self.input_panel)
        images_row.addWidget(self.output_panel)
        images_row.addStretch()
        layout.addLayout(images_row)

        self.summary_panel = SummaryPanel()
        layout.addWidget(self.summary_panel)
        layout.addStretch()

        self.setStatusBar(QStatusBar())

    def _build_menus(self) -> None:
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("&File")
        open_action = file_menu.addAction("Open Image…")
        open_action.triggered.connect(self._choose_file)
        self.settings_action = file_menu.addAction("Settings…")
        self.settings_action.triggered.connect(self._open_settings)
        file_menu.addSeparator()
        quit_action = file_menu.addAction("Quit")
        quit_action.triggered.connect(self.close)

    # --- Event handlers -------------------------------------------------

    def _choose_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self,
            "Select image",
            "",
            image_dialog_filter(),
        )
        self._acquire(AcquisitionEvent.from_picker([path] if path else []))

    def _on_mode_toggled(self, mode: AnalysisMode, checked: bool) -> None:
        if checked:
            self.session.select_mode(mode)

    def _handle_dropped_paths(self, paths: list[Path]) -> None:
        self._acquire(AcquisitionEvent.from_drop(paths))

    def _acquire(self, event: AcquisitionEvent) -> None:
        try:
            self.session.acquire(event)
        except UserInputError as exc:
            QMessageBox.warning(self, "Unable to open image", str(exc))

    def _run_prediction(self) -> None:
        self.session.submit()

    def _dispatch(self, job: SubmissionJob) -> None:
        worker = PredictionWorker(self.session.submission, job)
        worker.signals.finished.connect(self._on_worker_finished)
        worker.signals.error.connect(self._on_worker_error)
        self._workers[job.ticket.request_id] = worker
        self.thread_pool.start(worker)

    def _on_worker_finished(self, job: SubmissionJob, result: PredictionResult) -> None:
        self._workers.pop(job.ticket.request_id, None)
        self.session.submission.resolve(job, result)

    def _on_worker_error(self, job: SubmissionJob, error: Exception) -> None:
        self._workers.pop(job.ticket.request_id, None)
        self.session.submission.reject(job, error)

    def _show_notice(self, notice: Notice) -> None:
        if notice.error:
            QMessageBox.critical(self, notice.title, notice.message)
        else:
            QMessageBox.information(self, notice.title, notice.message)

    # --- Rendering ------------------------------------------------------

    def _on_state_changed(self, state: SessionState) -> None:
        self._render(self.session.view())

    def _render(self, view: ResultView) -> None:
        button = self.mode_buttons[view.mode]
        if not button.isChecked():
            button.blockSignals(True)
            button.setChecked(True)
            button.blockSignals(False)

        preview = view.input_preview
        self.input_panel.show_image(preview.thumbnail if preview is not None else None)
        self.output_panel.show_image(view.output_image)
        self.summary_panel.show_summary(view.summary)

        self.predict_btn.setEnabled(view.submit_enabled)
        self.predict_btn.setText(view.submit_label)
        self.settings_action.setEnabled(view.submit_enabled)
        self.progress_panel.show_status(view.status)
        self._set_busy_cursor(view.status is RequestStatus.PENDING)
        self._rebuild_status_bar(view)

    def _rebuild_status_bar(self, view: ResultView) -> None:
        self.statusBar().showMessage(
            f"Backend: {self.config.api_base_url} • Mode: {policy_for(view.mode).display_name}"
        )

    def _set_busy_cursor(self, active: bool) -> None:
        app = QApplication.instance()
        if app is None:
            return
        if active and not self._cursor_busy:
            QGuiApplication.setOverrideCursor(QtCore.Qt.CursorShape.WaitCursor)
            self._cursor_busy = True
        elif not active and self._cursor_busy:
            QGuiApplication.restoreOverrideCursor()
            self._cursor_busy = False

    # --- Settings -------------------------------------------------------

    def _open_settings(self) -> None:
        dialog = SettingsDialog(self.config, self)
        if dialog.exec() != dialog.DialogCode.Accepted:
            return
        self._apply_new_config(dialog.config())

    def _apply_new_config(self, config: AppConfig) -> None:
        self.config = config
        self.session.apply_config(config)
        self.settings_store.save(config)
        self._render(self.session.view())

    def closeEvent(self, event: QCloseEvent) -> None:
        self.session.close()
        super().closeEvent(event)
