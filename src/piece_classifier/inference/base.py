"""Abstract base class for score-vector inferencers."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from piece_classifier.types import ImageTensor


class BaseInferencer(ABC):
    """Base class for inference runtimes.

    Subclasses load a model once and implement ``forward``, which maps a
    ``(1, 1, H, W)`` image tensor to a flat score vector (one float per
    class, in the model's class order).
    """

    @abstractmethod
    def forward(self, tensor: ImageTensor) -> np.ndarray:  # type: ignore[type-arg]
        """Run the model on one tensor and return a flat float32 score vector."""

    def __call__(self, tensor: ImageTensor) -> np.ndarray:  # type: ignore[type-arg]
        return self.forward(tensor)
