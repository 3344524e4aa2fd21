"""Application bootstrap for the Qt-based GUI."""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from .main_window import MainWindow


def run_app() -> None:
    """Launch the GUI application."""
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Vegetation and Soil Analyzer")
    window = MainWindow()
    window.show()
    app.exec()
