"""Arg-max over a model's score vector."""

from __future__ import annotations

import math
from collections.abc import Iterable

from loguru import logger

from piece_classifier.errors import InvalidArgumentError
from piece_classifier.types import ScoreSelection


def select_max_score(scores: Iterable[float]) -> ScoreSelection:
    """Return the index and value of the highest score.

    Uses strict ``>`` so the first occurrence wins on ties.

    Raises:
        InvalidArgumentError: If ``scores`` is empty or contains NaN.
    """
    max_index = -1
    max_score = -math.inf
    for i, raw in enumerate(scores):
        score = float(raw)
        logger.debug(f"index: {i}  score: {score}")
        if math.isnan(score):
            raise InvalidArgumentError(f"Score at index {i} is NaN")
        if max_index < 0 or score > max_score:
            max_index = i
            max_score = score

    if max_index < 0:
        raise InvalidArgumentError("Cannot select from an empty score vector")

    logger.debug(f"maxIndex: {max_index} score: {max_score}")
    return ScoreSelection(index=max_index, value=max_score)
