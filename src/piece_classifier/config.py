"""Pydantic frozen configuration models for piece_classifier."""

from pydantic import BaseModel, field_validator

from piece_classifier.transforms.tensor import (
    TORCHVISION_NORM_MEAN_RGB,
    TORCHVISION_NORM_STD_RGB,
)
from piece_classifier.types import MemoryFormat


class SnapshotConfig(BaseModel, frozen=True):
    """Debug snapshot of the extracted gray plane. Off by default."""

    enabled: bool = False
    pictures_dir: str = "~/Pictures"
    suffix: str = "_piece"


class ClassifierConfig(BaseModel, frozen=True, protected_namespaces=()):
    """Configuration for ClassificationPipeline.

    All fields are validated at construction time and frozen after creation.
    ``region`` is ``(x, y, width, height)``; ``None`` means the whole image.
    """

    assets_dir: str
    files_dir: str
    model_asset: str = "mobile_chess_model4.ptl"
    image_asset: str = "board_2117_piece_3-2.bmp"
    labels_asset: str | None = None
    memory_format: MemoryFormat = MemoryFormat.CONTIGUOUS
    norm_mean: tuple[float, float, float] = TORCHVISION_NORM_MEAN_RGB
    norm_std: tuple[float, float, float] = TORCHVISION_NORM_STD_RGB
    region: tuple[int, int, int, int] | None = None
    output_dir: str | None = None
    snapshot: SnapshotConfig = SnapshotConfig()

    @field_validator("memory_format")
    @classmethod
    def _supported_memory_format(cls, v: MemoryFormat) -> MemoryFormat:
        if v not in (MemoryFormat.CONTIGUOUS, MemoryFormat.CHANNELS_LAST):
            raise ValueError(
                f"memory_format must be contiguous or channels_last, got {v.value}"
            )
        return v

    @field_validator("norm_std")
    @classmethod
    def _positive_std(cls, v: tuple[float, float, float]) -> tuple[float, float, float]:
        if any(s <= 0 for s in v):
            raise ValueError(f"norm_std entries must be positive, got {v}")
        return v

    @field_validator("region")
    @classmethod
    def _valid_region(
        cls, v: tuple[int, int, int, int] | None
    ) -> tuple[int, int, int, int] | None:
        if v is None:
            return v
        x, y, width, height = v
        if x < 0 or y < 0 or width <= 0 or height <= 0:
            raise ValueError(
                f"region must have x, y >= 0 and width, height > 0, got {v}"
            )
        return v
