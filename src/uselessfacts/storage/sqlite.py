"""SQLite storage for fact collections."""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from ..errors import OperationFailed
from ..models import FACTS, SUBMISSIONS
from ..seed import SEED_FACTS
from .base import FactStorage, Record

logger = logging.getLogger(__name__)

# Serialized field name -> column name
COLUMNS = {
    "id": "id",
    "text": "text",
    "category": "category",
    "submittedBy": "submitted_by",
    "source": "source",
    "createdAt": "created_at",
    "approved": "approved",
}

# Each collection only ever shows rows with this approved flag
APPROVED_FLAG = {
    FACTS: 1,
    SUBMISSIONS: 0,
}


class SQLiteFactStorage(FactStorage):
    """Persistent storage for facts using SQLite.

    Each collection is a table whose columns match the record fields.
    Writes commit immediately unless they run inside ``transaction()``,
    which commits once at the end or rolls everything back.

    One connection is shared by every thread. A re-entrant lock serializes
    its use, and a transaction holds the lock until it ends.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._tx_depth = 0
        self._lock = threading.RLock()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self, seed: bool = True) -> None:
        """Create the tables if they don't exist.

        Args:
            seed: Load the seed facts when the facts table is empty.
        """
        with self._lock:
            conn = self._get_connection()
            for table in (FACTS, SUBMISSIONS):
                conn.execute(f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        id            TEXT PRIMARY KEY,
                        text          TEXT NOT NULL,
                        category      TEXT NOT NULL,
                        submitted_by  TEXT,
                        source        TEXT,
                        created_at    TEXT,
                        approved      INTEGER NOT NULL DEFAULT {APPROVED_FLAG[table]}
                    )
                """)
                conn.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_{table}_category ON {table}(category)"
                )

            if seed:
                count = conn.execute(f"SELECT COUNT(*) FROM {FACTS}").fetchone()[0]
                if count == 0:
                    for record in SEED_FACTS:
                        self._insert_row(conn, FACTS, record)
            conn.commit()

    def _table(self, collection: str) -> str:
        if collection not in APPROVED_FLAG:
            raise ValueError(f"Unknown collection: {collection}")
        return collection

    def _commit(self) -> None:
        if self._tx_depth == 0:
            self._get_connection().commit()

    def _rollback(self) -> None:
        if self._tx_depth == 0 and self._conn is not None:
            try:
                self._conn.rollback()
            except sqlite3.Error as e:
                logger.error("Rollback failed on %s: %s", self.db_path, e)

    def _insert_row(self, conn: sqlite3.Connection, table: str, record: Record) -> None:
        values = self._to_row(record)
        values.setdefault("approved", APPROVED_FLAG[table])
        names = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        conn.execute(
            f"INSERT INTO {table} ({names}) VALUES ({placeholders})",
            tuple(values.values()),
        )

    def _read(self, collection: str) -> list[Record]:
        table = self._table(collection)
        try:
            with self._lock:
                cursor = self._get_connection().execute(
                    f"SELECT * FROM {table} WHERE approved = ? ORDER BY created_at DESC",
                    (APPROVED_FLAG[table],),
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise OperationFailed(f"Cannot read {table}: {e}") from e
        return [self._row_to_record(row) for row in rows]

    def get(self, collection: str, record_id: str) -> Record | None:
        table = self._table(collection)
        try:
            with self._lock:
                cursor = self._get_connection().execute(
                    f"SELECT * FROM {table} WHERE id = ? AND approved = ?",
                    (record_id, APPROVED_FLAG[table]),
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error("Failed to read %s/%s: %s", table, record_id, e)
            return None
        return self._row_to_record(row) if row is not None else None

    def put(self, collection: str, records: list[Record]) -> None:
        table = self._table(collection)
        with self._lock:
            try:
                conn = self._get_connection()
                conn.execute(f"DELETE FROM {table}")
                for record in records:
                    self._insert_row(conn, table, record)
                self._commit()
            except sqlite3.Error as e:
                self._rollback()
                raise OperationFailed(f"Cannot replace {table}: {e}") from e

    def insert(self, collection: str, record: Record) -> Record:
        table = self._table(collection)
        with self._lock:
            try:
                self._insert_row(self._get_connection(), table, record)
                self._commit()
            except sqlite3.Error as e:
                self._rollback()
                raise OperationFailed(f"Cannot insert into {table}: {e}") from e
        return record

    def update(self, collection: str, record_id: str, changes: Record) -> Record | None:
        table = self._table(collection)
        values = self._to_row(changes)
        values.pop("id", None)
        if not values:
            return self.get(collection, record_id)

        assignments = ", ".join(f"{name} = ?" for name in values)
        with self._lock:
            try:
                cursor = self._get_connection().execute(
                    f"UPDATE {table} SET {assignments} WHERE id = ?",
                    (*values.values(), record_id),
                )
                self._commit()
            except sqlite3.Error as e:
                self._rollback()
                raise OperationFailed(f"Cannot update {table}/{record_id}: {e}") from e

            if cursor.rowcount == 0:
                return None
            return self.get(collection, record_id)

    def delete(self, collection: str, record_id: str) -> bool:
        table = self._table(collection)
        with self._lock:
            try:
                cursor = self._get_connection().execute(
                    f"DELETE FROM {table} WHERE id = ?", (record_id,)
                )
                self._commit()
            except sqlite3.Error as e:
                self._rollback()
                raise OperationFailed(f"Cannot delete {table}/{record_id}: {e}") from e
            return cursor.rowcount > 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit every write in the block together, or roll all of them back."""
        with self._lock:
            self._tx_depth += 1
            try:
                yield
            except BaseException:
                self._tx_depth -= 1
                self._rollback()
                raise

            self._tx_depth -= 1
            if self._tx_depth == 0:
                try:
                    self._get_connection().commit()
                except sqlite3.Error as e:
                    self._rollback()
                    raise OperationFailed(f"Cannot commit transaction: {e}") from e

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _to_row(self, record: Record) -> dict[str, Any]:
        """Convert a serialized record to column values."""
        values: dict[str, Any] = {}
        for key, value in record.items():
            column = COLUMNS.get(key)
            if column is None:
                continue
            if column == "approved":
                value = 1 if value else 0
            values[column] = value
        return values

    def _row_to_record(self, row: sqlite3.Row) -> Record:
        """Convert a database row to a serialized record."""
        record: Record = {}
        for key, column in COLUMNS.items():
            value = row[column]
            if column == "approved":
                value = bool(value)
            if value is not None:
                record[key] = value
        return record
