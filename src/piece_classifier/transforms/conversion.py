"""Torchvision transform wrapping the grayscale tensor normalizer."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import torch
from PIL import Image
from torchvision.transforms import v2

from piece_classifier.errors import InvalidArgumentError
from piece_classifier.imaging import pixels_from_image
from piece_classifier.transforms.tensor import (
    TORCHVISION_NORM_MEAN_RGB,
    TORCHVISION_NORM_STD_RGB,
    bitmap_to_gray_float32_tensor,
)
from piece_classifier.types import MemoryFormat


class GrayscaleToTensor(v2.Transform):
    """Convert a PIL image into a ``(1, H, W)`` float32 tensor in ``[0, 1]``.

    Uses the low byte of each packed pixel, exactly like
    :func:`bitmap_to_gray_float32_tensor`, so a pipeline built from this
    transform feeds the model the same values as the demo app.

    Args:
        norm_mean_rgb: Accepted for signature compatibility, unused.
        norm_std_rgb: Accepted for signature compatibility, unused.
        memory_format: ``"contiguous"`` or ``"channels_last"``.
    """

    def __init__(
        self,
        norm_mean_rgb: Sequence[float] = TORCHVISION_NORM_MEAN_RGB,
        norm_std_rgb: Sequence[float] = TORCHVISION_NORM_STD_RGB,
        memory_format: MemoryFormat | str = MemoryFormat.CONTIGUOUS,
    ) -> None:
        super().__init__()
        self.norm_mean_rgb = tuple(norm_mean_rgb)
        self.norm_std_rgb = tuple(norm_std_rgb)
        self.memory_format = MemoryFormat(memory_format)
        if self.memory_format not in (
            MemoryFormat.CONTIGUOUS,
            MemoryFormat.CHANNELS_LAST,
        ):
            raise InvalidArgumentError(
                f"Unsupported memory format {self.memory_format.value!r}"
            )

    def forward(self, *inputs: Any) -> Any:
        img = inputs[0]
        rest = inputs[1:]

        if not isinstance(img, Image.Image):
            raise TypeError(f"GrayscaleToTensor expects a PIL Image, got {type(img)}")

        tensor = bitmap_to_gray_float32_tensor(
            pixels_from_image(img),
            self.norm_mean_rgb,
            self.norm_std_rgb,
            self.memory_format,
        )
        out = torch.from_numpy(tensor.numpy()[0].copy())

        return (out, *rest) if rest else out
