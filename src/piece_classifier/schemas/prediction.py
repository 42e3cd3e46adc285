"""Classification result schema."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from piece_classifier.types import MemoryFormat


class ClassificationResult(BaseModel, frozen=True):
    """Top-1 prediction for a single image."""

    filename: str | None = None
    class_id: int
    label: str
    score: float
    image_width: int
    image_height: int
    memory_format: MemoryFormat = MemoryFormat.CONTIGUOUS
    created_at: str = Field(default_factory=lambda: datetime.now(tz=UTC).isoformat())
