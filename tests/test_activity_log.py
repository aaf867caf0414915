"""Tests for JSONL activity logging."""

import json
import tempfile
import threading
from pathlib import Path

import pytest

from uselessfacts import activity_log
from uselessfacts.activity_log import JSONLLogger, LogEntry, configure_logger, get_logger


@pytest.fixture
def temp_log_dir():
    """Create a temporary directory for logs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def logger(temp_log_dir: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=temp_log_dir)


def test_log_entry_to_dict():
    """Test LogEntry excludes None values."""
    entry = LogEntry(timestamp="2024-01-01T00:00:00Z", event="test")
    data = entry.to_dict()

    assert "timestamp" in data
    assert "event" in data
    assert "fact_id" not in data  # None excluded
    assert "extra" not in data  # Empty dict excluded


def test_log_creates_file(logger: JSONLLogger):
    """Test that logging creates the log file."""
    logger.log("test_event")

    assert logger.log_path.exists()


def test_log_writes_jsonl(logger: JSONLLogger):
    """Test that logs are written in JSONL format."""
    logger.log("fact_approved", submission_id="10", fact_id="11")
    logger.log("fact_rejected", submission_id="12")

    with open(logger.log_path) as f:
        lines = f.readlines()

    assert len(lines) == 2

    entry1 = json.loads(lines[0])
    assert entry1["event"] == "fact_approved"
    assert entry1["submission_id"] == "10"
    assert entry1["fact_id"] == "11"

    entry2 = json.loads(lines[1])
    assert entry2["event"] == "fact_rejected"
    assert "fact_id" not in entry2


def test_extra_fields(logger: JSONLLogger):
    logger.log("fact_created", fact_id="1", category="Science")

    entry = json.loads(logger.log_path.read_text())
    assert entry["extra"] == {"category": "Science"}


def test_actor_applies_to_later_entries(logger: JSONLLogger):
    logger.set_actor("cli")
    logger.log("fact_deleted", fact_id="1")
    logger.log("fact_deleted", fact_id="2", actor="web")

    lines = [json.loads(line) for line in logger.log_path.read_text().splitlines()]
    assert lines[0]["actor"] == "cli"
    assert lines[1]["actor"] == "web"


def test_log_failure(logger: JSONLLogger):
    logger.log_failure("approve", RuntimeError("connection lost"), submission_id="5")

    entry = json.loads(logger.log_path.read_text())
    assert entry["event"] == "operation_failed"
    assert entry["error"] == "connection lost"
    assert entry["submission_id"] == "5"
    assert entry["extra"] == {"operation": "approve"}


def test_rotation(temp_log_dir: Path):
    """Test log rotation when file exceeds max size."""
    logger = JSONLLogger(log_dir=temp_log_dir, max_size_mb=0.0001)  # ~100 bytes

    for i in range(10):
        logger.log("fact_submitted", submission_id=str(i), text="x" * 50)

    files = list(temp_log_dir.glob("*.jsonl"))
    assert len(files) >= 2


def test_rotation_keeps_backup_count(temp_log_dir: Path):
    """Only the newest rotated files are kept, numbered newest first."""
    logger = JSONLLogger(log_dir=temp_log_dir, max_size_mb=0.00001, backup_count=2)  # ~10 bytes

    for i in range(5):
        logger.log("fact_submitted", submission_id=str(i))

    assert logger.rotated_logs() == [
        temp_log_dir / "activity.1.jsonl",
        temp_log_dir / "activity.2.jsonl",
    ]
    assert json.loads(logger.log_path.read_text())["submission_id"] == "4"
    assert json.loads(logger.rotated_logs()[0].read_text())["submission_id"] == "3"
    assert json.loads(logger.rotated_logs()[1].read_text())["submission_id"] == "2"


def test_rotation_without_backups(temp_log_dir: Path):
    logger = JSONLLogger(log_dir=temp_log_dir, max_size_mb=0.00001, backup_count=0)

    logger.log("fact_deleted", fact_id="1")
    logger.log("fact_deleted", fact_id="2")

    assert logger.rotated_logs() == []
    assert json.loads(logger.log_path.read_text())["fact_id"] == "2"


def test_concurrent_appends(logger: JSONLLogger):
    """Entries logged from several threads are all written as whole lines."""

    def worker(n: int):
        for i in range(25):
            logger.log("fact_submitted", submission_id=f"{n}-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    entries = [json.loads(line) for line in logger.log_path.read_text().splitlines()]
    assert len(entries) == 100
    assert len({e["submission_id"] for e in entries}) == 100


def test_configure_logger_replaces_global(temp_log_dir: Path, monkeypatch):
    monkeypatch.setattr(activity_log, "_logger", None)
    configured = configure_logger(log_dir=temp_log_dir)
    assert get_logger() is configured
    assert configured.log_dir == temp_log_dir
