"""Classification result writer using orjson."""

from __future__ import annotations

from pathlib import Path

import orjson

from piece_classifier.schemas.prediction import ClassificationResult


class ClassificationResultWriter:
    """Write one JSON file per classified image using orjson.

    Output files are named ``{image_stem}.json`` inside ``output_dir``;
    results without a filename are written to ``result.json``.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write(self, result: ClassificationResult) -> Path:
        """Write a single result to disk. Returns the output path."""
        stem = Path(result.filename).stem if result.filename else "result"
        out_path = self.output_dir / f"{stem}.json"
        data = orjson.dumps(result.model_dump(mode="json"), option=orjson.OPT_INDENT_2)
        out_path.write_bytes(data)
        return out_path
