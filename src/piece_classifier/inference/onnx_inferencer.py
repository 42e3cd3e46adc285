"""ONNX Runtime inferencer."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import onnxruntime as ort
from loguru import logger

from piece_classifier.errors import InferenceError, ModelLoadError
from piece_classifier.inference.base import BaseInferencer
from piece_classifier.types import ImageTensor


class ONNXInferencer(BaseInferencer):
    """Run a single-input ONNX classifier on CPU.

    The model takes a ``(1, 1, H, W)`` float32 tensor and its first output
    is taken as the score vector.  ONNX Runtime only consumes contiguous
    buffers, so the memory format tag is ignored.

    Args:
        model_path: Path to the ``.onnx`` file.
        providers: Execution providers; defaults to CPU only.
    """

    def __init__(
        self,
        model_path: str | Path,
        providers: list[str] | None = None,
    ) -> None:
        model_path = Path(model_path)
        try:
            self.session = ort.InferenceSession(
                str(model_path),
                providers=providers or ["CPUExecutionProvider"],
            )
        except Exception as e:
            raise ModelLoadError(f"Cannot load ONNX model {model_path}: {e}") from e
        self.input_name = self.session.get_inputs()[0].name
        logger.info(f"Loaded ONNX model {model_path} (input={self.input_name!r})")

    def forward(self, tensor: ImageTensor) -> np.ndarray:  # type: ignore[type-arg]
        input_array = np.ascontiguousarray(tensor.numpy(), dtype=np.float32)
        try:
            outputs = self.session.run(None, {self.input_name: input_array})
        except Exception as e:
            raise InferenceError(
                f"ONNX inference failed for input shape {input_array.shape}: {e}"
            ) from e
        return np.asarray(outputs[0], dtype=np.float32).reshape(-1)
