"""JSON-file storage with namespaced keys.

A single JSON document maps keys to values, the way browser local
storage does. The fact collections, the user's preference lists and the
admin password all live under their own key in the same file.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from ..errors import OperationFailed
from ..models import FACTS, SUBMISSIONS
from ..seed import SEED_FACTS
from .base import FactStorage, Record

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "FACTS": "facts_data",
    "SUBMITTED_FACTS": "submitted_facts",
    "BOOKMARKS": "bookmarkedFacts",
    "LIKED": "likedFacts",
    "DISLIKED": "dislikedFacts",
    "ADMIN_PASSWORD": "admin_password",
}

COLLECTION_KEYS = {
    FACTS: STORAGE_KEYS["FACTS"],
    SUBMISSIONS: STORAGE_KEYS["SUBMITTED_FACTS"],
}


class LocalStore:
    """Key-value store backed by one JSON file.

    Every call reads the file again, so edits made by another process are
    picked up. Inside ``batch()`` reads and writes go to a working copy
    that is written once when the block exits cleanly.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store with a file path.

        Args:
            path: Path to the JSON file. Created on first write.
        """
        self.path = Path(path)
        self._batch: dict[str, Any] | None = None
        self._batch_depth = 0

    def _load(self) -> dict[str, Any]:
        """Load the whole document from disk."""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise OperationFailed(f"Cannot read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise OperationFailed(f"Unexpected content in {self.path}")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Write the whole document to disk, replacing the old file."""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise OperationFailed(f"Cannot write {self.path}: {e}") from e

    def get_item(self, key: str, default: Any = None) -> Any:
        """Get the value stored under key.

        Raises:
            OperationFailed: If the file exists but cannot be read.
        """
        data = self._batch if self._batch is not None else self._load()
        return copy.deepcopy(data.get(key, default))

    def set_item(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key."""
        if self._batch is not None:
            self._batch[key] = copy.deepcopy(value)
            return

        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        if self._batch is not None:
            self._batch.pop(key, None)
            return

        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Apply every write in the block with a single file write.

        If the block raises, nothing is written.
        """
        if self._batch_depth == 0:
            self._batch = self._load()
        self._batch_depth += 1
        try:
            yield
        except BaseException:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._batch = None
            raise

        self._batch_depth -= 1
        if self._batch_depth == 0:
            data, self._batch = self._batch, None
            assert data is not None
            self._save(data)


class LocalFactStorage(FactStorage):
    """Fact collections kept in a LocalStore.

    The facts collection is seeded on first access; the submissions
    collection starts out empty.
    """

    def __init__(self, store: LocalStore) -> None:
        self.store = store

    def _key(self, collection: str) -> str:
        """Get the storage key for a collection."""
        if collection not in COLLECTION_KEYS:
            raise ValueError(f"Unknown collection: {collection}")
        return COLLECTION_KEYS[collection]

    def _read(self, collection: str) -> list[Record]:
        key = self._key(collection)
        records = self.store.get_item(key)

        if records is None:
            initial = copy.deepcopy(SEED_FACTS) if collection == FACTS else []
            try:
                self.store.set_item(key, initial)
            except OperationFailed as e:
                logger.warning("Cannot initialize %s: %s", key, e)
            return initial

        if not isinstance(records, list):
            raise OperationFailed(f"Key '{key}' does not hold a list")
        return records

    def put(self, collection: str, records: list[Record]) -> None:
        self.store.set_item(self._key(collection), records)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Write every mutation in the block at once, or none of them."""
        with self.store.batch():
            yield
