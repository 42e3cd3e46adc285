"""Tests for the demo run, the console display and the result writer."""

from __future__ import annotations

import io
import sys
from pathlib import Path

import numpy as np
import orjson
import pytest
from conftest import IMAGE_ASSET, MODEL_ASSET, FakeInferencer, write_onnx_model
from hydra.core.global_hydra import GlobalHydra
from loguru import logger
from PIL import Image
from rich.console import Console

from piece_classifier.config import ClassifierConfig
from piece_classifier.demo import main, run
from piece_classifier.display import BaseDisplay, ConsoleDisplay
from piece_classifier.errors import AssetNotFoundError, InferenceError
from piece_classifier.imaging import decode_bitmap
from piece_classifier.io.result import ClassificationResultWriter
from piece_classifier.schemas.prediction import ClassificationResult


class _RecordingDisplay(BaseDisplay):
    def __init__(self) -> None:
        self.images: list[Image.Image] = []
        self.texts: list[str] = []

    def set_image(self, image: Image.Image) -> None:
        self.images.append(image)

    def set_text(self, text: str) -> None:
        self.texts.append(text)


@pytest.fixture()
def demo_config(assets_dir: Path, tmp_path: Path) -> ClassifierConfig:
    return ClassifierConfig(
        assets_dir=str(assets_dir),
        files_dir=str(tmp_path / "files"),
        model_asset=MODEL_ASSET,
        image_asset=IMAGE_ASSET,
        output_dir=str(tmp_path / "results"),
    )


class TestRun:
    def test_shows_image_then_label(
        self,
        demo_config: ClassifierConfig,
        fake_inferencer: FakeInferencer,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        monkeypatch.setattr(
            "piece_classifier.pipeline.load_inferencer", lambda _: fake_inferencer
        )
        display = _RecordingDisplay()

        result = run(demo_config, display)

        assert len(display.images) == 1
        assert display.images[0].size == (8, 6)
        assert display.texts == ["white_rook"]
        assert result.label == "white_rook"
        assert (tmp_path / "results" / "board_2117_piece_3-2.json").exists()

    def test_missing_model_aborts_before_display(
        self, assets_dir: Path, tmp_path: Path
    ) -> None:
        config = ClassifierConfig(
            assets_dir=str(assets_dir),
            files_dir=str(tmp_path / "files"),
            model_asset="missing.ptl",
        )
        display = _RecordingDisplay()
        with pytest.raises(AssetNotFoundError):
            run(config, display)
        assert display.images == []
        assert display.texts == []

    def test_decodes_image_once(
        self,
        demo_config: ClassifierConfig,
        fake_inferencer: FakeInferencer,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(
            "piece_classifier.pipeline.load_inferencer", lambda _: fake_inferencer
        )
        decoded: list[int] = []

        def _counting_decode(data: bytes) -> tuple[Image.Image, np.ndarray]:
            decoded.append(len(data))
            return decode_bitmap(data)

        monkeypatch.setattr("piece_classifier.pipeline.decode_bitmap", _counting_decode)

        result = run(demo_config, _RecordingDisplay())

        assert len(decoded) == 1
        assert result.filename == IMAGE_ASSET

    def test_model_rejecting_input_raises_classifier_error(
        self, assets_dir: Path, tmp_path: Path
    ) -> None:
        # 2x2 model fed an 8x6 image
        write_onnx_model(assets_dir / "tiny.onnx")
        config = ClassifierConfig(
            assets_dir=str(assets_dir),
            files_dir=str(tmp_path / "files"),
            model_asset="tiny.onnx",
        )
        with pytest.raises(InferenceError):
            run(config, _RecordingDisplay())


class TestMain:
    def test_inference_failure_exits_with_status_1(
        self,
        assets_dir: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        write_onnx_model(assets_dir / "tiny.onnx")
        files_dir = tmp_path / "files"
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "sys.argv",
            [
                "piece-classifier-demo",
                f"classifier.assets_dir='{assets_dir}'",
                f"classifier.files_dir='{files_dir}'",
                "classifier.model_asset=tiny.onnx",
            ],
        )
        GlobalHydra.instance().clear()

        try:
            with pytest.raises(SystemExit) as exc_info:
                main()
        finally:
            GlobalHydra.instance().clear()
            logger.remove()
            logger.add(sys.stderr)

        assert exc_info.value.code == 1
        assert "Classification aborted" in capsys.readouterr().err


class TestConsoleDisplay:
    def test_prints_image_summary_and_label(self) -> None:
        buf = io.StringIO()
        display = ConsoleDisplay(Console(file=buf, width=80, color_system=None))

        display.set_image(Image.new("L", (32, 24)))
        display.set_text("black_queen")

        output = buf.getvalue()
        assert "32" in output
        assert "24" in output
        assert "black_queen" in output
        assert display.text == "black_queen"


class TestClassificationResultWriter:
    def test_writes_json(self, tmp_path: Path) -> None:
        result = ClassificationResult(
            filename="board.bmp",
            class_id=3,
            label="white_bishop",
            score=0.75,
            image_width=32,
            image_height=32,
        )
        out_path = ClassificationResultWriter(tmp_path / "out").write(result)

        assert out_path == tmp_path / "out" / "board.json"
        data = orjson.loads(out_path.read_bytes())
        assert data["label"] == "white_bishop"
        assert data["class_id"] == 3
        assert data["memory_format"] == "contiguous"

    def test_without_filename(self, tmp_path: Path) -> None:
        result = ClassificationResult(
            class_id=0, label="empty", score=1.0, image_width=1, image_height=1
        )
        assert ClassificationResultWriter(tmp_path).write(result).name == "result.json"
