"""Best-effort debug snapshots of the extracted grayscale plane."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from loguru import logger
from PIL import Image

SNAPSHOT_DIRNAME = "CPCamera"


@dataclass(frozen=True)
class SnapshotResult:
    """Outcome of a snapshot write. Callers are free to ignore it."""

    path: Path | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def gray_bytes_to_image(data: bytes, width: int, height: int) -> Image.Image:
    """Rebuild an opaque RGBA image from one gray byte per pixel.

    Every pixel becomes ``0xFF000000 | p << 16 | p << 8 | p``.
    """
    if len(data) != width * height:
        raise ValueError(
            f"Expected {width * height} bytes for {width}x{height}, got {len(data)}"
        )
    gray = np.frombuffer(data, dtype=np.uint8).reshape(height, width)
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = gray[..., np.newaxis]
    rgba[..., 3] = 0xFF
    return Image.fromarray(rgba)


def save_image_with_suffix(
    image: Image.Image | None, suffix: str, pictures_dir: str | Path
) -> SnapshotResult:
    """Save ``image`` as ``<pictures_dir>/CPCamera/<millis>xxx_<suffix>.jpg``.

    I/O and encoding errors are logged and returned in the result, never raised.
    """
    if image is None:
        return SnapshotResult(path=None, error="no image")

    app_dir = Path(pictures_dir) / SNAPSHOT_DIRNAME
    file_name = f"{int(time.time() * 1000)}xxx_{suffix}.jpg"
    path = app_dir / file_name
    try:
        app_dir.mkdir(parents=True, exist_ok=True)
        # JPEG has no alpha channel
        image.convert("RGB").save(path, format="JPEG", quality=100)
    except (OSError, ValueError) as e:
        logger.warning(f"Debug snapshot not written to {path}: {e}")
        return SnapshotResult(path=None, error=str(e))

    logger.debug(f"Debug snapshot written to {path}")
    return SnapshotResult(path=path)


def save_gray_snapshot(
    data: bytes, width: int, height: int, suffix: str, pictures_dir: str | Path
) -> SnapshotResult:
    """Rebuild a gray plane and save it; every failure ends up in the result."""
    try:
        image = gray_bytes_to_image(data, width, height)
    except ValueError as e:
        logger.warning(f"Debug snapshot image not built: {e}")
        return SnapshotResult(path=None, error=str(e))
    return save_image_with_suffix(image, suffix, pictures_dir)
