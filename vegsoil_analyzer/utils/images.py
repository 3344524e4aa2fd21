"""Pillow helpers for previews and decoded backend images."""

from __future__ import annotations

import base64
import binascii
import io
import logging

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def make_thumbnail(data: bytes, max_size: int) -> bytes | None:
    """Return a PNG thumbnail no larger than ``max_size`` on either edge.

    Returns None when Pillow cannot decode ``data``; the bytes are still
    submitted as-is and the backend decides whether they are usable.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.thumbnail((max_size, max_size))
            converted = img.convert("RGBA") if img.mode not in {"RGB", "RGBA", "L"} else img
            buffer = io.BytesIO()
            converted.save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.debug("Preview unavailable: %s", exc)
        return None
    return buffer.getvalue()


def decode_base64_image(text: str | None) -> bytes | None:
    """Decode a base64 image payload, tolerating data-URL prefixes."""
    if not text:
        return None
    if text.startswith("data:") and "," in text:
        text = text.split(",", 1)[1]
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.warning("Discarding undecodable output image: %s", exc)
        return None
