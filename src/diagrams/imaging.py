"""Raster size helpers."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

EMU_PER_PIXEL = 9525
DEFAULT_SIZE = (450, 350)


def read_image_size(path: str | Path) -> tuple[int, int] | None:
    """Pixel size read from the image header, or ``None`` if unreadable."""
    try:
        with Image.open(path) as image:
            width, height = image.size
    except (OSError, UnidentifiedImageError) as exc:
        logger.warning("Cannot read image size for %s: %s", path, exc)
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Scale ``(width, height)`` down into the box, keeping the aspect ratio.

    Width is clamped first; the height is then re-checked and may force a
    second scale-down. Images that already fit are returned unchanged.
    """
    if width <= 0 or height <= 0:
        return fit_within(*DEFAULT_SIZE, max_width, max_height)
    ratio = width / height
    out_w, out_h = width, height
    if out_w > max_width:
        out_w = max_width
        out_h = max(1, round(max_width / ratio))
    if out_h > max_height:
        out_h = max_height
        out_w = max(1, round(max_height * ratio))
    return out_w, out_h


def pixels_to_emu(pixels: int) -> int:
    return int(pixels) * EMU_PER_PIXEL


__all__ = ["DEFAULT_SIZE", "EMU_PER_PIXEL", "fit_within", "pixels_to_emu", "read_image_size"]
