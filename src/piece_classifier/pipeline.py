"""Decode -> normalize -> infer -> select -> label pipeline."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future
from pathlib import Path

import numpy as np
from loguru import logger
from PIL import Image

from piece_classifier.assets import AssetStore, asset_file_path
from piece_classifier.config import ClassifierConfig, SnapshotConfig
from piece_classifier.imaging import decode_bitmap
from piece_classifier.inference import BaseInferencer, load_inferencer
from piece_classifier.labels import DEFAULT_LABEL_TABLE, LabelTable
from piece_classifier.schemas.prediction import ClassificationResult
from piece_classifier.selection import select_max_score
from piece_classifier.transforms.tensor import (
    TORCHVISION_NORM_MEAN_RGB,
    TORCHVISION_NORM_STD_RGB,
    bitmap_region_to_gray_float32_tensor,
    bitmap_to_gray_float32_tensor_with_snapshot,
)
from piece_classifier.types import ImageTensor, MemoryFormat


class ClassificationPipeline:
    """Classify single images with a loaded model and a fixed label table.

    Each call builds its own pixel grid and tensor; nothing is cached
    between calls, so one pipeline can serve several threads as long as
    the inferencer can.

    Args:
        assets: Store the images are read from.
        inferencer: Loaded inference runtime.
        labels: Label table parallel to the model's outputs.
        memory_format: Layout tag for the input tensor.
        norm_mean: Passed to the normalizer, unused by it.
        norm_std: Passed to the normalizer, unused by it.
        region: Optional ``(x, y, width, height)`` crop; whole image if None.
        snapshot: Debug snapshot settings.
    """

    def __init__(
        self,
        assets: AssetStore,
        inferencer: BaseInferencer,
        labels: LabelTable = DEFAULT_LABEL_TABLE,
        memory_format: MemoryFormat = MemoryFormat.CONTIGUOUS,
        norm_mean: Sequence[float] = TORCHVISION_NORM_MEAN_RGB,
        norm_std: Sequence[float] = TORCHVISION_NORM_STD_RGB,
        region: tuple[int, int, int, int] | None = None,
        snapshot: SnapshotConfig | None = None,
    ) -> None:
        self.assets = assets
        self.inferencer = inferencer
        self.labels = labels
        self.memory_format = MemoryFormat(memory_format)
        self.norm_mean = tuple(norm_mean)
        self.norm_std = tuple(norm_std)
        self.region = region
        self.snapshot = snapshot or SnapshotConfig()

    @classmethod
    def from_config(cls, config: ClassifierConfig) -> ClassificationPipeline:
        """Stage the model, load it and the label table.

        Raises:
            AssetNotFoundError: If the model or labels asset is missing.
            ModelLoadError: If the runtime cannot load the staged model.
        """
        assets = AssetStore(config.assets_dir)
        model_path = asset_file_path(assets, config.model_asset, config.files_dir)
        inferencer = load_inferencer(model_path)

        labels = DEFAULT_LABEL_TABLE
        if config.labels_asset is not None:
            labels_path = asset_file_path(
                assets, config.labels_asset, config.files_dir
            )
            labels = LabelTable.from_mapping_file(labels_path)
        logger.info(f"Using {labels!r}")

        return cls(
            assets=assets,
            inferencer=inferencer,
            labels=labels,
            memory_format=config.memory_format,
            norm_mean=config.norm_mean,
            norm_std=config.norm_std,
            region=config.region,
            snapshot=config.snapshot,
        )

    def _to_tensor(self, pixels: np.ndarray) -> ImageTensor:  # type: ignore[type-arg]
        height, width = pixels.shape
        x, y, w, h = self.region or (0, 0, width, height)
        if self.snapshot.enabled:
            tensor, _ = bitmap_to_gray_float32_tensor_with_snapshot(
                pixels,
                Path(self.snapshot.pictures_dir).expanduser(),
                x,
                y,
                w,
                h,
                self.norm_mean,
                self.norm_std,
                self.memory_format,
                suffix=self.snapshot.suffix,
            )
            return tensor
        return bitmap_region_to_gray_float32_tensor(
            pixels, x, y, w, h, self.norm_mean, self.norm_std, self.memory_format
        )

    def classify_pixels(
        self,
        pixels: np.ndarray,  # type: ignore[type-arg]
        filename: str | None = None,
    ) -> ClassificationResult:
        """Classify an already decoded pixel grid."""
        tensor = self._to_tensor(pixels)
        scores = self.inferencer(tensor)
        self.labels.check_scores(scores)

        selection = select_max_score(scores)
        label = self.labels.lookup(selection.index)
        logger.info(
            f"className: {label} (index={selection.index}, score={selection.value:.4f})"
        )
        return ClassificationResult(
            filename=filename,
            class_id=selection.index,
            label=label,
            score=selection.value,
            image_width=tensor.width,
            image_height=tensor.height,
            memory_format=self.memory_format,
        )

    def load_image(self, image_name: str) -> tuple[Image.Image, np.ndarray]:  # type: ignore[type-arg]
        """Read and decode an image asset into a PIL image and pixel grid."""
        return decode_bitmap(self.assets.open_bytes(image_name))

    def classify_asset(self, image_name: str) -> ClassificationResult:
        """Read, decode and classify the named image asset."""
        _, pixels = self.load_image(image_name)
        return self.classify_pixels(pixels, filename=image_name)

    def _submit(
        self,
        work: Callable[[], ClassificationResult],
        description: str,
        executor: Executor,
        callback: Callable[[ClassificationResult], None] | None,
    ) -> Future[ClassificationResult]:
        def _run() -> ClassificationResult:
            try:
                result = work()
            except Exception:
                logger.exception(f"Classification of {description} failed")
                raise
            if callback is not None:
                callback(result)
            return result

        return executor.submit(_run)

    def submit(
        self,
        image_name: str,
        executor: Executor,
        callback: Callable[[ClassificationResult], None] | None = None,
    ) -> Future[ClassificationResult]:
        """Classify ``image_name`` on ``executor``.

        ``callback`` runs with the result once it is ready.  Errors are
        logged here and re-raised by ``Future.result()``; the callback is
        not called for a failed run.
        """
        return self._submit(
            lambda: self.classify_asset(image_name),
            repr(image_name),
            executor,
            callback,
        )

    def submit_pixels(
        self,
        pixels: np.ndarray,  # type: ignore[type-arg]
        executor: Executor,
        callback: Callable[[ClassificationResult], None] | None = None,
        filename: str | None = None,
    ) -> Future[ClassificationResult]:
        """Like :meth:`submit`, for a grid that is already decoded."""
        return self._submit(
            lambda: self.classify_pixels(pixels, filename=filename),
            repr(filename) if filename else "pixel grid",
            executor,
            callback,
        )
