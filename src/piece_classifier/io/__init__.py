"""Result export and debug snapshot writers."""

from piece_classifier.io.result import ClassificationResultWriter
from piece_classifier.io.snapshot import SnapshotResult, save_image_with_suffix

__all__ = [
    "ClassificationResultWriter",
    "SnapshotResult",
    "save_image_with_suffix",
]
