"""Tests for LabelTable."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from piece_classifier.errors import (
    IndexOutOfRangeError,
    InvalidArgumentError,
    LabelTableMismatchError,
)
from piece_classifier.labels import CHESS_PIECE_CLASSES, DEFAULT_LABEL_TABLE, LabelTable


def _write_mapping(tmp_path: Path, idx_to_class: dict[str, str]) -> Path:
    path = tmp_path / "labels_mapping.json"
    path.write_text(json.dumps({"idx_to_class": idx_to_class}))
    return path


class TestLabelTable:
    def test_lookup(self) -> None:
        table = LabelTable(["a", "b", "c"])
        assert table.lookup(0) == "a"
        assert table.lookup(2) == "c"

    def test_out_of_range(self) -> None:
        table = LabelTable(["a", "b", "c"])
        with pytest.raises(IndexOutOfRangeError):
            table.lookup(5)

    def test_negative_index_does_not_wrap(self) -> None:
        with pytest.raises(IndexOutOfRangeError):
            LabelTable(["a", "b", "c"]).lookup(-1)

    def test_out_of_range_is_index_error(self) -> None:
        with pytest.raises(IndexError):
            LabelTable(["a"]).lookup(1)

    def test_immutable_copy(self) -> None:
        source = ["a", "b"]
        table = LabelTable(source)
        source.append("c")
        assert len(table) == 2
        assert table.labels == ("a", "b")

    def test_check_scores(self) -> None:
        table = LabelTable(["a", "b", "c"])
        table.check_scores([0.1, 0.2, 0.3])
        with pytest.raises(LabelTableMismatchError, match="3 entries"):
            table.check_scores([0.1, 0.2])

    def test_mismatch_is_invalid_argument(self) -> None:
        with pytest.raises(InvalidArgumentError):
            LabelTable(["a"]).check_scores([])

    def test_default_table(self) -> None:
        assert len(DEFAULT_LABEL_TABLE) == len(CHESS_PIECE_CLASSES)
        assert DEFAULT_LABEL_TABLE.lookup(0) == "empty"
        assert list(DEFAULT_LABEL_TABLE) == list(CHESS_PIECE_CLASSES)


class TestLabelTableFromMappingFile:
    def test_loads_in_index_order(self, tmp_path: Path) -> None:
        path = _write_mapping(tmp_path, {"1": "pawn", "0": "empty", "2": "king"})
        table = LabelTable.from_mapping_file(path)
        assert table.labels == ("empty", "pawn", "king")

    def test_gap_in_indices(self, tmp_path: Path) -> None:
        path = _write_mapping(tmp_path, {"0": "empty", "2": "king"})
        with pytest.raises(LabelTableMismatchError):
            LabelTable.from_mapping_file(path)

    @pytest.mark.parametrize(
        "content",
        [
            '{"classes": ["a"]}',
            '{"idx_to_class": {"zero": "a"}}',
            '{"idx_to_class": ["a", "b"]}',
            "not json",
        ],
    )
    def test_malformed_mapping(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "labels_mapping.json"
        path.write_text(content)
        with pytest.raises(LabelTableMismatchError, match="Invalid labels mapping"):
            LabelTable.from_mapping_file(path)
