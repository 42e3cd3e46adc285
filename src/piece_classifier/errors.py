"""Exception hierarchy for piece_classifier."""

from __future__ import annotations


class ClassifierError(Exception):
    """Base class for all piece_classifier errors."""


class AssetNotFoundError(ClassifierError, FileNotFoundError):
    """A named asset (model or image blob) does not exist."""


class ImageDecodeError(ClassifierError, ValueError):
    """Asset bytes could not be decoded into a pixel grid."""


class InvalidArgumentError(ClassifierError, ValueError):
    """Bad rectangle bounds, unsupported memory format or empty scores."""


class IndexOutOfRangeError(ClassifierError, IndexError):
    """Label lookup with an index outside the table."""


class LabelTableMismatchError(InvalidArgumentError):
    """Label table and score vector disagree in length."""


class ModelLoadError(ClassifierError, RuntimeError):
    """The inference runtime failed to load a model file."""


class InferenceError(ClassifierError, RuntimeError):
    """The inference runtime rejected an input or failed while running."""
