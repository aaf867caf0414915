"""Persistence adapter interface shared by every storage backend."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ..errors import OperationFailed

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class FactStorage(ABC):
    """Reads and writes record collections for the repository.

    Backends implement ``_read`` and ``put``. Everything else has a
    read-modify-write default built on those two, which backends with
    native row operations override.

    Read paths (``list``, ``get``) log failures and degrade to an empty
    result. Write paths raise OperationFailed.
    """

    @abstractmethod
    def _read(self, collection: str) -> list[Record]:
        """Read a whole collection.

        Raises:
            OperationFailed: If the underlying store cannot be read.
        """
        ...

    @abstractmethod
    def put(self, collection: str, records: list[Record]) -> None:
        """Replace a whole collection.

        Raises:
            OperationFailed: If the write fails. Nothing is partially written.
        """
        ...

    def list(self, collection: str) -> list[Record]:
        """List the records of a collection, or [] if it cannot be read."""
        try:
            return self._read(collection)
        except OperationFailed as e:
            logger.error("Failed to read %s: %s", collection, e)
            return []

    def get(self, collection: str, record_id: str) -> Record | None:
        """Get a single record by id, or None if absent or unreadable."""
        for record in self.list(collection):
            if str(record.get("id")) == record_id:
                return record
        return None

    def insert(self, collection: str, record: Record) -> Record:
        """Append a record to a collection and return it."""
        records = self._read(collection)
        self.put(collection, [*records, record])
        return record

    def update(self, collection: str, record_id: str, changes: Record) -> Record | None:
        """Merge changes into a record.

        Returns:
            The updated record, or None if no record has that id.
        """
        records = self._read(collection)
        updated: Record | None = None
        merged: list[Record] = []
        for record in records:
            if str(record.get("id")) == record_id:
                updated = {**record, **changes}
                merged.append(updated)
            else:
                merged.append(record)

        if updated is None:
            return None

        self.put(collection, merged)
        return updated

    def delete(self, collection: str, record_id: str) -> bool:
        """Remove a record.

        Returns:
            True if a record was removed, False if the id was absent.
        """
        records = self._read(collection)
        remaining = [r for r in records if str(r.get("id")) != record_id]
        if len(remaining) == len(records):
            return False
        self.put(collection, remaining)
        return True

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group several mutations.

        The default runs them as independent calls; backends that can
        apply them atomically override this.
        """
        yield

    def close(self) -> None:
        """Release any held resources."""
        pass
