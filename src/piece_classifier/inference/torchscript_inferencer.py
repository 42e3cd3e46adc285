"""TorchScript / PyTorch Mobile inferencer."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import torch
from loguru import logger

from piece_classifier.errors import InferenceError, ModelLoadError
from piece_classifier.inference.base import BaseInferencer
from piece_classifier.types import ImageTensor, MemoryFormat

LITE_SUFFIX = ".ptl"


class TorchScriptInferencer(BaseInferencer):
    """Run a serialized TorchScript module on CPU.

    ``.ptl`` files are lite-interpreter (mobile) bundles and go through
    the mobile loader; anything else goes through ``torch.jit.load``.

    Args:
        model_path: Path to the ``.pt`` / ``.ptl`` file.
    """

    def __init__(self, model_path: str | Path) -> None:
        model_path = Path(model_path)
        try:
            if model_path.suffix == LITE_SUFFIX:
                from torch.jit.mobile import _load_for_lite_interpreter

                self.module = _load_for_lite_interpreter(str(model_path), "cpu")
            else:
                self.module = torch.jit.load(str(model_path), map_location="cpu")
                self.module.eval()
        except Exception as e:
            raise ModelLoadError(
                f"Cannot load TorchScript model {model_path}: {e}"
            ) from e
        logger.info(f"Loaded TorchScript model {model_path}")

    def forward(self, tensor: ImageTensor) -> np.ndarray:  # type: ignore[type-arg]
        input_tensor = torch.from_numpy(tensor.numpy())
        if tensor.memory_format == MemoryFormat.CHANNELS_LAST:
            input_tensor = input_tensor.contiguous(memory_format=torch.channels_last)

        try:
            with torch.inference_mode():
                output = self.module(input_tensor)
        except Exception as e:
            raise InferenceError(
                f"TorchScript inference failed for input shape {tensor.shape}: {e}"
            ) from e

        return output.detach().cpu().numpy().astype(np.float32).reshape(-1)
