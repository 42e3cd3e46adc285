"""Fixed, ordered class label tables."""

from __future__ import annotations

import json
from collections.abc import Iterator, Sequence, Sized
from pathlib import Path

from piece_classifier.errors import IndexOutOfRangeError, LabelTableMismatchError

CHESS_PIECE_CLASSES: tuple[str, ...] = (
    "empty",
    "white_pawn",
    "white_knight",
    "white_bishop",
    "white_rook",
    "white_queen",
    "white_king",
    "black_pawn",
    "black_knight",
    "black_bishop",
    "black_rook",
    "black_queen",
    "black_king",
)


class LabelTable:
    """Immutable index -> label table, parallel to the model's output order."""

    __slots__ = ("_labels",)

    def __init__(self, labels: Sequence[str]) -> None:
        self._labels: tuple[str, ...] = tuple(labels)

    @classmethod
    def from_mapping_file(cls, path: str | Path) -> LabelTable:
        """Load a ``labels_mapping.json`` sidecar.

        Expects an ``idx_to_class`` object whose keys are the contiguous
        indices ``"0"`` .. ``"N-1"``.
        """
        try:
            with open(path) as f:
                mapping = json.load(f)
            idx_to_class = {
                int(k): str(v) for k, v in mapping["idx_to_class"].items()
            }
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise LabelTableMismatchError(f"Invalid labels mapping {path}: {e!r}") from e
        if sorted(idx_to_class) != list(range(len(idx_to_class))):
            raise LabelTableMismatchError(
                f"idx_to_class in {path} is not indexed 0..{len(idx_to_class) - 1}"
            )
        return cls([idx_to_class[i] for i in range(len(idx_to_class))])

    def lookup(self, index: int) -> str:
        """Return the label at ``index``.

        Raises:
            IndexOutOfRangeError: If ``index`` is outside ``[0, len(self))``.
        """
        if not 0 <= index < len(self._labels):
            raise IndexOutOfRangeError(
                f"Label index {index} out of range for table of size {len(self._labels)}"
            )
        return self._labels[index]

    def check_scores(self, scores: Sized) -> None:
        """Raise if the score vector does not have one entry per label."""
        if len(scores) != len(self._labels):
            raise LabelTableMismatchError(
                f"Model produced {len(scores)} scores but the label table "
                f"has {len(self._labels)} entries"
            )

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __repr__(self) -> str:
        return f"LabelTable({len(self._labels)} labels)"


DEFAULT_LABEL_TABLE = LabelTable(CHESS_PIECE_CLASSES)
