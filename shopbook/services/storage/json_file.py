"""
JSON File Storage Implementation

DESIGN DECISION: The whole key-value store lives in one JSON file
(`<data_dir>/data/shop-data.json`) because:
1. The shop owner can open, copy or email it
2. No database setup required
3. Backups are a plain file copy of a single snapshot

TRADEOFFS:
- Every write rewrites the whole file (fine at small-business scale)
- No transactions across keys (collections have no cross-references)

Writes go to a temporary sibling file that then replaces the snapshot, so a
crash mid-write never leaves a half-written file behind. A snapshot that
cannot be parsed is copied to `<name>.corrupt` before the first write
replaces it.
"""

import json
import os
from pathlib import Path
from typing import Optional

import structlog

from shopbook.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value text store backed by a single JSON object on disk.

    The file is re-read on every access so that edits made outside the
    app (or restored backups) are picked up without a restart.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._damaged_text: Optional[str] = None

    @property
    def path(self) -> Path:
        """Location of the snapshot file."""
        return self._path

    def _read_all(self) -> dict[str, str]:
        """
        Load the snapshot; a missing or unreadable file reads as empty.

        The raw text of an unreadable file is remembered so the next write
        can set it aside before replacing it.
        """
        self._damaged_text = None
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise ConnectionError(f"Cannot read data file {self._path}: {e}")

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(
                "data_file_unreadable",
                path=str(self._path),
                error=str(e),
            )
            self._damaged_text = raw
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "data_file_unexpected_shape",
                path=str(self._path),
                found=type(data).__name__,
            )
            self._damaged_text = raw
            return {}

        # Values are text by contract; anything else is re-serialized.
        return {
            str(key): value if isinstance(value, str) else json.dumps(value)
            for key, value in data.items()
        }

    def _quarantine_path(self) -> Path:
        candidate = self._path.with_name(self._path.name + ".corrupt")
        counter = 1
        while candidate.exists():
            candidate = self._path.with_name(f"{self._path.name}.corrupt.{counter}")
            counter += 1
        return candidate

    def _write_all(self, data: dict[str, str]) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if self._damaged_text is not None:
                quarantine_path = self._quarantine_path()
                quarantine_path.write_text(self._damaged_text, encoding="utf-8")
                logger.warning(
                    "data_file_quarantined",
                    path=str(self._path),
                    quarantine_path=str(quarantine_path),
                )
                self._damaged_text = None
            tmp_path.write_text(
                json.dumps(data, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageError(f"Failed to write data file {self._path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True

    def keys(self) -> list[str]:
        return list(self._read_all())
