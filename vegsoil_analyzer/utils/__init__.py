"""Utility helpers for the analyzer client."""

from .images import decode_base64_image, make_thumbnail
from .paths import guess_content_type, image_dialog_filter

__all__ = [
    "decode_base64_image",
    "guess_content_type",
    "image_dialog_filter",
    "make_thumbnail",
]
