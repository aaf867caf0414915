"""Tests for SQLiteFactStorage."""

import sqlite3
import threading
from pathlib import Path
from unittest.mock import Mock

import pytest

from uselessfacts.errors import OperationFailed
from uselessfacts.seed import SEED_FACTS
from uselessfacts.storage import SQLiteFactStorage


@pytest.fixture
def storage(tmp_path: Path) -> SQLiteFactStorage:
    """Create an empty SQLiteFactStorage with a temporary database."""
    storage = SQLiteFactStorage(tmp_path / "facts.db")
    storage.init_db(seed=False)
    yield storage
    storage.close()


def fact(record_id: str, created_at: str | None = None, **extra) -> dict:
    record = {"id": record_id, "text": f"Fact number {record_id}.", "category": "Science"}
    if created_at:
        record["createdAt"] = created_at
    record.update(extra)
    return record


class TestSQLiteInit:
    """Tests for SQLiteFactStorage initialization."""

    def test_creates_db_directory(self, tmp_path: Path):
        nested_path = tmp_path / "nested" / "dir" / "facts.db"
        storage = SQLiteFactStorage(nested_path)
        storage.init_db()
        assert nested_path.exists()
        storage.close()

    def test_creates_tables(self, storage: SQLiteFactStorage):
        conn = storage._get_connection()
        names = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        assert {"facts", "submitted_facts"} <= names

    def test_seeds_empty_facts_table(self, tmp_path: Path):
        storage = SQLiteFactStorage(tmp_path / "seeded.db")
        storage.init_db()
        storage.init_db()  # Seeding is not repeated
        assert len(storage.list("facts")) == len(SEED_FACTS)
        assert storage.list("submitted_facts") == []
        storage.close()

    def test_init_db_idempotent(self, storage: SQLiteFactStorage):
        storage.init_db(seed=False)
        storage.init_db(seed=False)  # Should not raise


class TestSQLiteOperations:
    """Tests for reads and writes."""

    def test_insert_and_get(self, storage: SQLiteFactStorage):
        storage.insert("facts", fact("1", submittedBy="Ann", approved=True))
        record = storage.get("facts", "1")
        assert record == {
            "id": "1",
            "text": "Fact number 1.",
            "category": "Science",
            "submittedBy": "Ann",
            "approved": True,
        }

    def test_collection_default_approved_flag(self, storage: SQLiteFactStorage):
        """Rows inserted without a flag take the collection's flag."""
        storage.insert("submitted_facts", fact("1", submittedBy="Ann"))
        assert storage.get("submitted_facts", "1")["approved"] is False

    def test_list_newest_first(self, storage: SQLiteFactStorage):
        storage.insert("facts", fact("old", "2024-01-01T00:00:00+00:00"))
        storage.insert("facts", fact("new", "2024-06-01T00:00:00+00:00"))
        storage.insert("facts", fact("seed"))
        assert [r["id"] for r in storage.list("facts")] == ["new", "old", "seed"]

    def test_list_hides_rows_with_other_flag(self, storage: SQLiteFactStorage):
        storage.insert("facts", fact("1", approved=False))
        assert storage.list("facts") == []
        assert storage.get("facts", "1") is None

    def test_duplicate_id_raises(self, storage: SQLiteFactStorage):
        storage.insert("facts", fact("1"))
        with pytest.raises(OperationFailed, match="Cannot insert"):
            storage.insert("facts", fact("1"))

    def test_update(self, storage: SQLiteFactStorage):
        storage.insert("facts", fact("1"))
        updated = storage.update("facts", "1", {"text": "Changed text here.", "source": "wiki"})
        assert updated["text"] == "Changed text here."
        assert updated["source"] == "wiki"

    def test_update_missing_returns_none(self, storage: SQLiteFactStorage):
        assert storage.update("facts", "missing", {"text": "Changed text here."}) is None

    def test_delete(self, storage: SQLiteFactStorage):
        storage.insert("facts", fact("1"))
        assert storage.delete("facts", "1") is True
        assert storage.delete("facts", "1") is False

    def test_put_replaces(self, storage: SQLiteFactStorage):
        storage.insert("facts", fact("1"))
        storage.put("facts", [fact("2"), fact("3")])
        assert {r["id"] for r in storage.list("facts")} == {"2", "3"}

    def test_put_failure_keeps_old_rows(self, storage: SQLiteFactStorage):
        storage.insert("facts", fact("1"))
        with pytest.raises(OperationFailed):
            storage.put("facts", [fact("2"), fact("2")])
        assert [r["id"] for r in storage.list("facts")] == ["1"]


class TestSQLiteTransaction:
    """Tests for grouped writes."""

    def test_commits_together(self, storage: SQLiteFactStorage, tmp_path: Path):
        storage.insert("submitted_facts", fact("p1", submittedBy="Ann"))
        with storage.transaction():
            storage.insert("facts", fact("f1"))
            storage.delete("submitted_facts", "p1")

        other = SQLiteFactStorage(tmp_path / "facts.db")
        assert [r["id"] for r in other.list("facts")] == ["f1"]
        assert other.list("submitted_facts") == []
        other.close()

    def test_rolls_back_on_error(self, storage: SQLiteFactStorage):
        storage.insert("submitted_facts", fact("p1", submittedBy="Ann"))
        with pytest.raises(RuntimeError):
            with storage.transaction():
                storage.insert("facts", fact("f1"))
                storage.delete("submitted_facts", "p1")
                raise RuntimeError("boom")

        assert storage.list("facts") == []
        assert storage.get("submitted_facts", "p1") is not None


class TestSQLiteThreads:
    """Tests for use from threads other than the one that opened the database."""

    def test_worker_thread_reads_and_writes(self, storage: SQLiteFactStorage):
        storage.insert("facts", fact("1"))
        results = {}

        def worker():
            results["before"] = [r["id"] for r in storage.list("facts")]
            storage.insert("facts", fact("2", created_at="2024-01-01T00:00:00+00:00"))
            results["after"] = [r["id"] for r in storage.list("facts")]

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert results["before"] == ["1"]
        assert sorted(results["after"]) == ["1", "2"]
        assert storage.get("facts", "2") is not None

    def test_failed_rollback_is_not_raised(self, storage: SQLiteFactStorage):
        """A rollback error is logged; the write still fails as OperationFailed."""
        storage.close()
        conn = Mock(spec=sqlite3.Connection)
        conn.execute.side_effect = sqlite3.ProgrammingError("closed")
        conn.rollback.side_effect = sqlite3.ProgrammingError("closed")
        storage._conn = conn

        with pytest.raises(OperationFailed, match="Cannot insert into facts"):
            storage.insert("facts", fact("1"))
        conn.rollback.assert_called_once()
