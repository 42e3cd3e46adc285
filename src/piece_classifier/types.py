"""Shared types for piece_classifier inter-module contracts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

import numpy as np

from piece_classifier.errors import InvalidArgumentError


class MemoryFormat(str, Enum):
    """Memory layout tag attached to a tensor.

    Only ``CONTIGUOUS`` and ``CHANNELS_LAST`` are accepted by the tensor
    normalizer.  For single-channel output both produce the same buffer.
    """

    CONTIGUOUS = "contiguous"
    CHANNELS_LAST = "channels_last"
    CHANNELS_LAST_3D = "channels_last_3d"


class ScoreSelection(NamedTuple):
    """Arg-max result: smallest index holding the maximum score."""

    index: int
    value: float


@dataclass(frozen=True, eq=False)
class ImageTensor:
    """Flat float32 buffer tagged with shape and memory format.

    data: 1-D float32 array of length ``prod(shape)``.
    shape: Logical shape, ``(1, 1, H, W)`` for grayscale images.
    memory_format: Layout the consumer should assume.
    """

    data: np.ndarray  # type: ignore[type-arg]
    shape: tuple[int, ...]
    memory_format: MemoryFormat = MemoryFormat.CONTIGUOUS

    @classmethod
    def from_blob(
        cls,
        buffer: np.ndarray,  # type: ignore[type-arg]
        shape: tuple[int, ...],
        memory_format: MemoryFormat = MemoryFormat.CONTIGUOUS,
    ) -> ImageTensor:
        """Wrap ``buffer`` without copying after checking its length."""
        numel = math.prod(shape)
        if buffer.ndim != 1 or buffer.size != numel:
            raise InvalidArgumentError(
                f"Buffer of size {buffer.size} does not match shape {shape}"
            )
        return cls(data=buffer, shape=tuple(shape), memory_format=memory_format)

    def numpy(self) -> np.ndarray:  # type: ignore[type-arg]
        """Return the buffer reshaped to ``shape`` (row-major view)."""
        return self.data.reshape(self.shape)

    @property
    def height(self) -> int:
        return self.shape[-2]

    @property
    def width(self) -> int:
        return self.shape[-1]
