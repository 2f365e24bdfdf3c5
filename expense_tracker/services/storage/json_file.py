"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object file is used as the durable backend
because:
1. It mirrors the slot layout of the browser store one-to-one
2. No database setup required
3. Users can inspect or back up their data by copying one file

TRADEOFFS:
- The whole file is rewritten on every change (fine for personal use)
- No locking: two processes writing at once means last write wins
- A corrupt file is treated as empty rather than blocking startup

The implementation follows the abstract interface, so it can be swapped
without changing the stores.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from expense_tracker.services.storage.interface import (
    KeyValueStore,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Key-value store persisted as {slot: string} in one JSON file.

    The file is re-read on every access so that external edits are seen.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageReadError(f"Failed to read {self._path}: {e}")

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(
                "storage_file_unreadable",
                path=str(self._path),
                error=str(e),
            )
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "storage_file_unreadable",
                path=str(self._path),
                error=f"expected object, got {type(data).__name__}",
            )
            return {}

        # Slots always hold strings; anything else is dropped
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: dict[str, str]) -> None:
        # Sibling temp file, then atomic replace
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self._path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Failed to write {self._path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        self._dump(data)
