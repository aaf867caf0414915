"""JSONL activity log for moderation and content events."""

import json
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    fact_id: str | None = None
    submission_id: str | None = None
    actor: str | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Append-only JSONL log of who did what to which fact.

    The web server handles requests on several threads, so appends and
    rotation happen under one lock. A full log is renamed to
    ``<stem>.<n>.jsonl`` (1 is the newest) and at most ``backup_count``
    rotated files are kept.
    """

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "activity.jsonl",
        max_size_mb: float = 10.0,
        backup_count: int = 5,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".uselessfacts" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self.backup_count = backup_count
        self._current_actor: str | None = None
        self._lock = threading.Lock()

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def _backup_path(self, n: int) -> Path:
        return self.log_dir / f"{self.log_path.stem}.{n}.jsonl"

    def rotated_logs(self) -> list[Path]:
        """Rotated log files, newest first."""
        paths = []
        n = 1
        while self._backup_path(n).exists():
            paths.append(self._backup_path(n))
            n += 1
        return paths

    def set_actor(self, actor: str | None) -> None:
        """Set who is acting (e.g. 'cli', 'web') for all subsequent logs."""
        self._current_actor = actor

    def _rotate(self) -> None:
        # Shift <stem>.n -> <stem>.n+1, dropping whatever falls past backup_count
        backups = self.rotated_logs()
        for n in range(len(backups), 0, -1):
            if n >= self.backup_count:
                self._backup_path(n).unlink()
            else:
                self._backup_path(n).rename(self._backup_path(n + 1))

        if self.backup_count > 0:
            self.log_path.rename(self._backup_path(1))
        else:
            self.log_path.unlink()

    def _append(self, entry: LogEntry) -> None:
        line = json.dumps(entry.to_dict(), ensure_ascii=False) + "\n"
        with self._lock:
            if self.log_path.exists() and self.log_path.stat().st_size >= self.max_size_bytes:
                self._rotate()
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(line)

    def log(
        self,
        event: str,
        *,
        fact_id: str | None = None,
        submission_id: str | None = None,
        actor: str | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Record an event such as fact_approved or admin_login."""
        self._append(LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            fact_id=fact_id,
            submission_id=submission_id,
            actor=actor or self._current_actor,
            error=error,
            extra=extra,
        ))

    def log_failure(self, operation: str, error: Exception, **extra: Any) -> None:
        """Log a storage operation that failed."""
        self.log("operation_failed", error=str(error), operation=operation, **extra)


_logger: JSONLLogger | None = None
_logger_lock = threading.Lock()


def get_logger() -> JSONLLogger:
    """Process-wide activity log, created in the default directory on first use."""
    global _logger
    with _logger_lock:
        if _logger is None:
            _logger = JSONLLogger()
        return _logger


def configure_logger(
    log_dir: str | Path | None = None,
    max_size_mb: float = 10.0,
    backup_count: int = 5,
) -> JSONLLogger:
    """Point the process-wide activity log at log_dir and return it."""
    global _logger
    with _logger_lock:
        _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb, backup_count=backup_count)
        return _logger
