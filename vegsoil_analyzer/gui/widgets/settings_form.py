"""Dialog that exposes application settings with validation."""

from __future__ import annotations

from functools import partial

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QDoubleSpinBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QMessageBox,
    QSpinBox,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ...config import AnalysisMode, AppConfig
from ...models.modes import policy_for


class SettingsDialog(QDialog):
    """Shows a validated form for editing application configuration."""

    def __init__(self, config: AppConfig, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self._original_config = config
        self._config: AppConfig | None = None
        self._field_min_width = 320

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(12)

        self.base_url_edit = QLineEdit(config.api_base_url)
        self._normalise_width(self.base_url_edit)

        # Zero on the spin box stands for "no explicit timeout".
        self.timeout_spin = QDoubleSpinBox()
        self.timeout_spin.setRange(0.0, 600.0)
        self.timeout_spin.setSingleStep(5.0)
        self.timeout_spin.setDecimals(1)
        self.timeout_spin.setSpecialValueText("Transport default")
        self.timeout_spin.setValue(config.request_timeout or 0.0)
        self._normalise_width(self.timeout_spin)

        self.mode_combo = QComboBox()
        for mode in AnalysisMode:
            self.mode_combo.addItem(policy_for(mode).display_name, mode.value)
        idx = self.mode_combo.findData(config.default_mode.value)
        self.mode_combo.setCurrentIndex(max(idx, 0))
        self._normalise_width(self.mode_combo)

        self.preview_spin = QSpinBox()
        self.preview_spin.setRange(32, 4096)
        self.preview_spin.setSingleStep(50)
        self.preview_spin.setValue(config.preview_max_size)
        self._normalise_width(self.preview_spin)

        self.clear_on_switch_check = QCheckBox("Clear the displayed result when switching mode")
        self.clear_on_switch_check.setChecked(config.clear_result_on_mode_switch)

        self.discard_stale_check = QCheckBox("Ignore replies for a previously selected image")
        self.discard_stale_check.setChecked(config.discard_stale_responses)

        backend_group = QGroupBox("Prediction backend")
        backend_form = self._create_form_layout()
        backend_form.addRow(
            "Base URL",
            self._with_help(
                self.base_url_edit,
                "Base URL",
                "Address of the prediction server. Images are posted to "
                "<base>/predict/vegetation or <base>/predict/soil.",
            ),
        )
        backend_form.addRow(
            "Timeout (s)",
            self._with_help(
                self.timeout_spin,
                "Timeout",
                "How long to wait for a prediction. Leave at zero to rely on the HTTP "
                "library default, which waits indefinitely.",
            ),
        )
        backend_group.setLayout(backend_form)
        main_layout.addWidget(backend_group)

        behaviour_group = QGroupBox("Behaviour")
        behaviour_form = self._create_form_layout()
        behaviour_form.addRow("Start in mode", self.mode_combo)
        behaviour_form.addRow("Preview size (px)", self.preview_spin)
        behaviour_form.addRow(
            "",
            self._with_help(
                self.clear_on_switch_check,
                "Clear on mode switch",
                "When unchecked the last result stays visible after switching mode so both "
                "summaries can be compared against the same reply.",
            ),
        )
        behaviour_form.addRow(
            "",
            self._with_help(
                self.discard_stale_check,
                "Ignore stale replies",
                "When a new image is selected while a prediction is running, the late reply "
                "for the old image is dropped instead of being shown.",
            ),
        )
        behaviour_group.setLayout(behaviour_form)
        main_layout.addWidget(behaviour_group)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        main_layout.addWidget(buttons, alignment=Qt.AlignmentFlag.AlignRight)

        self.setMinimumWidth(520)

    def _on_accept(self) -> None:
        data = self._collect_form_data()
        try:
            self._config = AppConfig.model_validate(data)
        except Exception as exc:
            QMessageBox.critical(self, "Invalid settings", str(exc))
            return
        self.accept()

    def _collect_form_data(self) -> dict[str, object]:
        timeout = self.timeout_spin.value()
        return {
            **self._original_config.as_dict(),
            "api_base_url": self.base_url_edit.text(),
            "request_timeout": timeout if timeout > 0 else None,
            "default_mode": self.mode_combo.currentData(),
            "preview_max_size": self.preview_spin.value(),
            "clear_result_on_mode_switch": self.clear_on_switch_check.isChecked(),
            "discard_stale_responses": self.discard_stale_check.isChecked(),
        }

    def config(self) -> AppConfig:
        return self._config or self._original_config

    def _with_help(self, widget: QWidget, title: str, message: str) -> QWidget:
        container = QWidget()
        layout = QHBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(widget)
        layout.addStretch()
        layout.addWidget(self._make_help_button(title, message))
        self._normalise_width(container)
        return container

    def _make_help_button(self, title: str, message: str) -> QToolButton:
        button = QToolButton(self)
        button.setText("?")
        button.setAutoRaise(True)
        button.setFixedSize(24, 24)
        button.clicked.connect(partial(QMessageBox.information, self, title, message))
        return button

    def _normalise_width(self, widget: QWidget) -> None:
        widget.setMinimumWidth(self._field_min_width)

    def _create_form_layout(self) -> QFormLayout:
        layout = QFormLayout()
        layout.setFieldGrowthPolicy(QFormLayout.FieldGrowthPolicy.AllNonFixedFieldsGrow)
        layout.setLabelAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        return layout
