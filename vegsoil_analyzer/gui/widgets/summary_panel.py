"""Panel listing the mode-specific prediction summary."""

from __future__ import annotations

import html
from collections.abc import Sequence

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QGroupBox, QLabel, QVBoxLayout, QWidget

from ...models.base import SummaryLine


class SummaryPanel(QGroupBox):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__("Prediction Results", parent)
        self._layout = QVBoxLayout(self)
        self._layout.setSpacing(6)
        self._rows: list[QLabel] = []
        self.setVisible(False)

    def show_summary(self, lines: Sequence[SummaryLine] | None) -> None:
        for row in self._rows:
            self._layout.removeWidget(row)
            row.deleteLater()
        self._rows.clear()

        if lines is None:
            self.setVisible(False)
            return

        for line in lines:
            label = QLabel(f"<b>{line.label}:</b> {html.escape(line.value)}")
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            self._layout.addWidget(label)
            self._rows.append(label)
        self.setVisible(True)
