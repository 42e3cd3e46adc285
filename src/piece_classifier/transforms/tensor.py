"""Bitmap to grayscale float32 tensor conversion.

The pixel grid holds packed ``0xAARRGGBB`` values.  Only the low byte of each
pixel is used: element ``i`` of the output is ``(pixel_i & 0xFF) / 255``.

The ``norm_mean_rgb`` / ``norm_std_rgb`` arguments are part of the public
signature and are validated, but no mean/std normalization is applied.
Output values stay in ``[0, 1]``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np

from piece_classifier.errors import InvalidArgumentError
from piece_classifier.io.snapshot import (
    SnapshotResult,
    save_gray_snapshot,
)
from piece_classifier.types import ImageTensor, MemoryFormat

TORCHVISION_NORM_MEAN_RGB: tuple[float, float, float] = (0.485, 0.456, 0.406)
TORCHVISION_NORM_STD_RGB: tuple[float, float, float] = (0.229, 0.224, 0.225)

_SUPPORTED_FORMATS = frozenset({MemoryFormat.CONTIGUOUS, MemoryFormat.CHANNELS_LAST})


def _check_memory_format(memory_format: MemoryFormat | str) -> MemoryFormat:
    try:
        supported = memory_format in _SUPPORTED_FORMATS
    except TypeError:
        supported = False
    if not supported:
        raise InvalidArgumentError(f"Unsupported memory format {memory_format!r}")
    return MemoryFormat(memory_format)


def _check_norm(name: str, values: Sequence[float]) -> None:
    if len(values) != 3:
        raise InvalidArgumentError(f"{name} must have 3 entries, got {len(values)}")


def _check_region(
    pixels: np.ndarray,  # type: ignore[type-arg]
    x: int,
    y: int,
    width: int,
    height: int,
) -> None:
    if pixels.ndim != 2:
        raise InvalidArgumentError(
            f"Pixel grid must be 2-D (height, width), got shape {pixels.shape}"
        )
    grid_height, grid_width = pixels.shape
    if x < 0 or y < 0 or width <= 0 or height <= 0:
        raise InvalidArgumentError(
            f"Invalid region x={x} y={y} width={width} height={height}"
        )
    if x + width > grid_width or y + height > grid_height:
        raise InvalidArgumentError(
            f"Region x={x} y={y} width={width} height={height} exceeds "
            f"grid {grid_width}x{grid_height}"
        )


def low_byte_plane(
    pixels: np.ndarray,  # type: ignore[type-arg]
    x: int,
    y: int,
    width: int,
    height: int,
) -> np.ndarray:  # type: ignore[type-arg]
    """Return the ``(height, width)`` uint8 low-byte channel of a region."""
    _check_region(pixels, x, y, width, height)
    region = pixels[y : y + height, x : x + width]
    return (region & 0xFF).astype(np.uint8)


def bitmap_to_float_buffer(
    pixels: np.ndarray,  # type: ignore[type-arg]
    x: int,
    y: int,
    width: int,
    height: int,
    norm_mean_rgb: Sequence[float],
    norm_std_rgb: Sequence[float],
    out_buffer: np.ndarray,  # type: ignore[type-arg]
    out_buffer_offset: int = 0,
    memory_format: MemoryFormat | str = MemoryFormat.CONTIGUOUS,
) -> None:
    """Write the normalized region into ``out_buffer`` starting at an offset.

    All arguments are validated before ``out_buffer`` is touched, so a
    failure never leaves partial output behind.

    Raises:
        InvalidArgumentError: On an unsupported memory format, a region
            outside the grid, or an output buffer that is too short.
    """
    _check_memory_format(memory_format)
    _check_norm("norm_mean_rgb", norm_mean_rgb)
    _check_norm("norm_std_rgb", norm_std_rgb)
    plane = low_byte_plane(pixels, x, y, width, height)

    pixels_count = width * height
    if out_buffer_offset < 0 or out_buffer_offset + pixels_count > out_buffer.size:
        raise InvalidArgumentError(
            f"Output buffer of size {out_buffer.size} cannot hold {pixels_count} "
            f"values at offset {out_buffer_offset}"
        )

    # Single channel: CONTIGUOUS and CHANNELS_LAST share the same layout.
    out_buffer[out_buffer_offset : out_buffer_offset + pixels_count] = (
        plane.reshape(-1).astype(np.float32) / np.float32(255.0)
    )


def bitmap_region_to_gray_float32_tensor(
    pixels: np.ndarray,  # type: ignore[type-arg]
    x: int,
    y: int,
    width: int,
    height: int,
    norm_mean_rgb: Sequence[float] = TORCHVISION_NORM_MEAN_RGB,
    norm_std_rgb: Sequence[float] = TORCHVISION_NORM_STD_RGB,
    memory_format: MemoryFormat | str = MemoryFormat.CONTIGUOUS,
) -> ImageTensor:
    """Convert a region of the grid into a ``(1, 1, height, width)`` tensor."""
    memory_format = _check_memory_format(memory_format)
    _check_norm("norm_mean_rgb", norm_mean_rgb)
    _check_norm("norm_std_rgb", norm_std_rgb)
    _check_region(pixels, x, y, width, height)
    buffer = np.empty(width * height, dtype=np.float32)
    bitmap_to_float_buffer(
        pixels,
        x,
        y,
        width,
        height,
        norm_mean_rgb,
        norm_std_rgb,
        buffer,
        0,
        memory_format,
    )
    return ImageTensor.from_blob(buffer, (1, 1, height, width), memory_format)


def bitmap_to_gray_float32_tensor(
    pixels: np.ndarray,  # type: ignore[type-arg]
    norm_mean_rgb: Sequence[float] = TORCHVISION_NORM_MEAN_RGB,
    norm_std_rgb: Sequence[float] = TORCHVISION_NORM_STD_RGB,
    memory_format: MemoryFormat | str = MemoryFormat.CONTIGUOUS,
) -> ImageTensor:
    """Convert the whole grid into a ``(1, 1, H, W)`` tensor."""
    if pixels.ndim != 2:
        raise InvalidArgumentError(
            f"Pixel grid must be 2-D (height, width), got shape {pixels.shape}"
        )
    height, width = pixels.shape
    return bitmap_region_to_gray_float32_tensor(
        pixels, 0, 0, width, height, norm_mean_rgb, norm_std_rgb, memory_format
    )


def bitmap_to_gray_float32_tensor_with_snapshot(
    pixels: np.ndarray,  # type: ignore[type-arg]
    pictures_dir: str | Path,
    x: int | None = None,
    y: int | None = None,
    width: int | None = None,
    height: int | None = None,
    norm_mean_rgb: Sequence[float] = TORCHVISION_NORM_MEAN_RGB,
    norm_std_rgb: Sequence[float] = TORCHVISION_NORM_STD_RGB,
    memory_format: MemoryFormat | str = MemoryFormat.CONTIGUOUS,
    suffix: str = "_piece",
) -> tuple[ImageTensor, SnapshotResult]:
    """Debug variant: also save the extracted gray plane as a JPEG.

    Omitted region arguments default to the full grid.  The snapshot is
    best-effort; its outcome is reported in the returned
    :class:`SnapshotResult` and never changes the tensor.
    """
    if pixels.ndim != 2:
        raise InvalidArgumentError(
            f"Pixel grid must be 2-D (height, width), got shape {pixels.shape}"
        )
    grid_height, grid_width = pixels.shape
    x = 0 if x is None else x
    y = 0 if y is None else y
    width = grid_width - x if width is None else width
    height = grid_height - y if height is None else height

    tensor = bitmap_region_to_gray_float32_tensor(
        pixels, x, y, width, height, norm_mean_rgb, norm_std_rgb, memory_format
    )
    plane = low_byte_plane(pixels, x, y, width, height)
    snapshot = save_gray_snapshot(plane.tobytes(), width, height, suffix, pictures_dir)
    return tensor, snapshot
