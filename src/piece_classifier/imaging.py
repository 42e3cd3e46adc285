"""Decode bitmaps into packed ``0xAARRGGBB`` pixel grids."""

from __future__ import annotations

import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from piece_classifier.errors import ImageDecodeError


def pixels_from_image(image: Image.Image) -> np.ndarray:  # type: ignore[type-arg]
    """Pack a PIL image into a read-only ``(H, W)`` uint32 pixel grid.

    Each value is ``a << 24 | r << 16 | g << 8 | b``, so the low byte holds
    the blue channel (equal to the gray level for grayscale images).
    """
    rgba = np.asarray(image.convert("RGBA"), dtype=np.uint32)
    packed = (
        (rgba[..., 3] << 24) | (rgba[..., 0] << 16) | (rgba[..., 1] << 8) | rgba[..., 2]
    )
    packed = np.ascontiguousarray(packed, dtype=np.uint32)
    packed.flags.writeable = False
    return packed


def decode_bitmap(data: bytes) -> tuple[Image.Image, np.ndarray]:  # type: ignore[type-arg]
    """Decode encoded image bytes (BMP, PNG, JPEG, ...).

    Returns:
        The decoded PIL image and its packed pixel grid.

    Raises:
        ImageDecodeError: If Pillow cannot identify or read the bytes.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Cannot decode image ({len(data)} bytes): {e}") from e
    return image, pixels_from_image(image)
