"""Inference runtimes producing per-class score vectors."""

from __future__ import annotations

from pathlib import Path

from piece_classifier.errors import ModelLoadError
from piece_classifier.inference.base import BaseInferencer
from piece_classifier.inference.onnx_inferencer import ONNXInferencer
from piece_classifier.inference.torchscript_inferencer import TorchScriptInferencer

_TORCHSCRIPT_SUFFIXES = (".pt", ".ptl", ".torchscript")


def load_inferencer(model_path: str | Path) -> BaseInferencer:
    """Pick a runtime from the model file suffix and load the model."""
    model_path = Path(model_path)
    suffix = model_path.suffix.lower()
    if suffix == ".onnx":
        return ONNXInferencer(model_path)
    if suffix in _TORCHSCRIPT_SUFFIXES:
        return TorchScriptInferencer(model_path)
    raise ModelLoadError(f"No inference runtime for model file {model_path.name!r}")


__all__ = [
    "BaseInferencer",
    "ONNXInferencer",
    "TorchScriptInferencer",
    "load_inferencer",
]
