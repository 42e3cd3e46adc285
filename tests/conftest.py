"""Shared pytest fixtures for piece_classifier tests."""

from pathlib import Path

import numpy as np
import onnx
import pytest
from onnx import TensorProto, helper, numpy_helper
from PIL import Image

from piece_classifier.imaging import pixels_from_image
from piece_classifier.inference.base import BaseInferencer
from piece_classifier.labels import CHESS_PIECE_CLASSES
from piece_classifier.types import ImageTensor

IMAGE_ASSET = "board_2117_piece_3-2.bmp"
MODEL_ASSET = "mobile_chess_model4.onnx"

NUM_CLASSES = 3
# Class k sums the input pixels weighted by column k
WEIGHTS = np.array(
    [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0], [1.0, 1.0, 1.0]],
    dtype=np.float32,
)


def make_gray_image(width: int = 8, height: int = 6) -> Image.Image:
    """Grayscale ramp: pixel (x, y) has level ``(y * width + x) * 5 % 256``."""
    levels = (np.arange(width * height, dtype=np.uint32) * 5 % 256).astype(np.uint8)
    return Image.fromarray(levels.reshape(height, width))


def write_onnx_model(path: Path) -> Path:
    """Flatten a (1, 1, 2, 2) input and project it onto 3 classes."""
    graph = helper.make_graph(
        nodes=[
            helper.make_node("Flatten", ["input"], ["flat"], axis=1),
            helper.make_node("MatMul", ["flat", "weights"], ["logits"]),
        ],
        name="tiny_piece_classifier",
        inputs=[
            helper.make_tensor_value_info("input", TensorProto.FLOAT, [1, 1, 2, 2])
        ],
        outputs=[
            helper.make_tensor_value_info("logits", TensorProto.FLOAT, [1, NUM_CLASSES])
        ],
        initializer=[numpy_helper.from_array(WEIGHTS, name="weights")],
    )
    model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 17)])
    model.ir_version = 8
    onnx.save(model, str(path))
    return path


class FakeInferencer(BaseInferencer):
    """Returns fixed scores and records every tensor it sees."""

    def __init__(self, scores: list[float]) -> None:
        self.scores = np.asarray(scores, dtype=np.float32)
        self.calls: list[ImageTensor] = []

    def forward(self, tensor: ImageTensor) -> np.ndarray:
        self.calls.append(tensor)
        return self.scores


@pytest.fixture()
def gray_image() -> Image.Image:
    return make_gray_image()


@pytest.fixture()
def pixels(gray_image: Image.Image) -> np.ndarray:
    """8x6 packed ARGB grid of the grayscale ramp."""
    return pixels_from_image(gray_image)


@pytest.fixture()
def assets_dir(tmp_path: Path, gray_image: Image.Image) -> Path:
    """Asset directory with a BMP image and an opaque model blob."""
    root = tmp_path / "assets"
    root.mkdir()
    gray_image.save(root / IMAGE_ASSET, format="BMP")
    (root / MODEL_ASSET).write_bytes(b"\x08\x01opaque-model-bytes")
    return root


@pytest.fixture()
def fake_inferencer() -> FakeInferencer:
    """Scores with class 4 ("white_rook") on top."""
    scores = [0.0] * len(CHESS_PIECE_CLASSES)
    scores[4] = 3.0
    scores[9] = 1.5
    return FakeInferencer(scores)
