"""Image to tensor conversion for the classification pipeline."""

from piece_classifier.transforms.conversion import GrayscaleToTensor
from piece_classifier.transforms.tensor import (
    TORCHVISION_NORM_MEAN_RGB,
    TORCHVISION_NORM_STD_RGB,
    bitmap_region_to_gray_float32_tensor,
    bitmap_to_float_buffer,
    bitmap_to_gray_float32_tensor,
    bitmap_to_gray_float32_tensor_with_snapshot,
)

__all__ = [
    "TORCHVISION_NORM_MEAN_RGB",
    "TORCHVISION_NORM_STD_RGB",
    "GrayscaleToTensor",
    "bitmap_region_to_gray_float32_tensor",
    "bitmap_to_float_buffer",
    "bitmap_to_gray_float32_tensor",
    "bitmap_to_gray_float32_tensor_with_snapshot",
]
