"""Path helpers used when offering and reading image files."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Iterable

IMAGE_EXTENSIONS = {
    ".jpg",
    ".jpeg",
    ".png",
    ".webp",
    ".bmp",
    ".tiff",
    ".tif",
    ".gif",
}


def image_dialog_filter(extensions: Iterable[str] | None = None) -> str:
    """Build a file dialog filter string such as ``Images (*.jpg *.png)``.

    The filter only narrows what the picker shows; files are never rejected
    on extension alone.
    """
    patterns = " ".join(f"*{ext}" for ext in sorted(extensions or IMAGE_EXTENSIONS))
    return f"Images ({patterns});;All files (*)"


def guess_content_type(path: Path) -> str | None:
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type
