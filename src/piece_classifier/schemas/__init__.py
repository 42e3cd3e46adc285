"""Classification result schemas."""

from piece_classifier.schemas.prediction import ClassificationResult

__all__ = ["ClassificationResult"]
