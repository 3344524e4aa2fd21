"""Titled panel that shows an encoded image scaled to a maximum width."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget


class ImagePanel(QWidget):
    def __init__(self, title: str, max_width: int = 400, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._max_width = max_width

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        heading = QLabel(f"<h3>{title}</h3>")
        heading.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._image = QLabel()
        self._image.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout.addWidget(heading)
        layout.addWidget(self._image)
        self.setVisible(False)

    def show_image(self, data: bytes | None) -> None:
        """Display ``data``; hides the panel when it is empty or undecodable."""
        pixmap = QPixmap()
        if not data or not pixmap.loadFromData(data):
            self._image.clear()
            self.setVisible(False)
            return
        if pixmap.width() > self._max_width:
            pixmap = pixmap.scaledToWidth(
                self._max_width, Qt.TransformationMode.SmoothTransformation
            )
        self._image.setPixmap(pixmap)
        self.setVisible(True)
