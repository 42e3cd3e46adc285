"""Read-only asset store and local staging of model blobs."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import BinaryIO

from loguru import logger

from piece_classifier.errors import AssetNotFoundError

_COPY_CHUNK_SIZE = 4 * 1024


class AssetStore:
    """Named byte blobs packaged under a single directory.

    Names are relative paths inside ``root``; anything resolving outside
    of it is treated as missing.

    Args:
        root: Directory holding the packaged assets.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _resolve(self, name: str) -> Path:
        path = (self.root / name).resolve()
        if not path.is_relative_to(self.root.resolve()) or not path.is_file():
            raise AssetNotFoundError(f"Asset not found: {name!r} in {self.root}")
        return path

    def exists(self, name: str) -> bool:
        try:
            self._resolve(name)
        except AssetNotFoundError:
            return False
        return True

    def names(self) -> list[str]:
        """Sorted relative names of every asset in the store."""
        if not self.root.is_dir():
            return []
        return sorted(
            p.relative_to(self.root).as_posix()
            for p in self.root.rglob("*")
            if p.is_file()
        )

    def open_stream(self, name: str) -> BinaryIO:
        """Open an asset for binary reading. Caller closes the stream."""
        return open(self._resolve(name), "rb")

    def open_bytes(self, name: str) -> bytes:
        return self._resolve(name).read_bytes()


def asset_file_path(store: AssetStore, name: str, files_dir: str | Path) -> Path:
    """Copy ``name`` from ``store`` into ``files_dir`` and return its absolute path.

    An already staged, non-empty copy is reused as-is.

    Raises:
        AssetNotFoundError: If ``name`` is not in the store.
    """
    files_dir = Path(files_dir)
    target = files_dir / name
    if target.exists() and target.stat().st_size > 0:
        logger.debug(f"Reusing staged asset {target}")
        return target.resolve()

    with store.open_stream(name) as src:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as dst:
            shutil.copyfileobj(src, dst, _COPY_CHUNK_SIZE)

    logger.info(f"Staged asset {name!r} to {target} ({target.stat().st_size} bytes)")
    return target.resolve()
