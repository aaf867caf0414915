"""Typed operations over the published and pending fact collections."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from .errors import NotFound, ValidationError
from .models import FACTS, SUBMISSIONS, Fact, SubmittedFact
from .storage import FactStorage, Record
from .validation import (
    validate_category,
    validate_optional,
    validate_submitter,
    validate_text,
)

if TYPE_CHECKING:
    from .activity_log import JSONLLogger

logger = logging.getLogger(__name__)

# Fields an admin may change on a published fact, with their serialized names
EDITABLE_FIELDS = {
    "text": "text",
    "category": "category",
    "source": "source",
    "submitted_by": "submittedBy",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FactRepository:
    """Reads and writes facts and submissions through a storage backend.

    Nothing is cached: every call goes to the storage, so callers see the
    current state after each mutation.
    """

    def __init__(
        self,
        storage: FactStorage,
        allow_custom_categories: bool = False,
        activity: JSONLLogger | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            storage: Backend holding both collections.
            allow_custom_categories: Accept categories outside CATEGORIES.
            activity: Optional activity logger for domain events.
        """
        self.storage = storage
        self.allow_custom_categories = allow_custom_categories
        self.activity = activity

    def _log_event(self, event: str, **extra: Any) -> None:
        if self.activity is not None:
            self.activity.log(event, **extra)

    def new_id(self, collection: str, reserved: Iterable[str] = ()) -> str:
        """Generate a time-based id that is unused in the collection.

        Args:
            collection: Collection the id must be unique in.
            reserved: Extra ids that must not be returned.
        """
        existing = {str(r.get("id")) for r in self.storage.list(collection)}
        existing.update(reserved)
        candidate = int(time.time() * 1000)
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def _load_facts(self, records: list[Record]) -> list[Fact]:
        facts = []
        for record in records:
            if not record.get("approved", True):
                continue
            try:
                facts.append(Fact.from_dict(record))
            except TypeError:
                logger.warning("Skipping malformed fact record: %r", record)
        return facts

    def _load_submissions(self, records: list[Record]) -> list[SubmittedFact]:
        submissions = []
        for record in records:
            if record.get("approved", False):
                continue
            try:
                submissions.append(SubmittedFact.from_dict(record))
            except TypeError:
                logger.warning("Skipping malformed submission record: %r", record)
        return submissions

    # Published facts

    def list_published(self) -> list[Fact]:
        """List all approved facts."""
        return self._load_facts(self.storage.list(FACTS))

    def list_published_by_category(self, category: str) -> list[Fact]:
        """List approved facts whose category matches exactly."""
        return [f for f in self.list_published() if f.category == category]

    def get_published(self, fact_id: str) -> Fact | None:
        """Get an approved fact by id."""
        record = self.storage.get(FACTS, fact_id)
        if record is None:
            return None
        facts = self._load_facts([record])
        return facts[0] if facts else None

    def insert_fact(self, fact: Fact) -> Fact:
        """Append an already-built fact to the published collection."""
        self.storage.insert(FACTS, fact.to_dict())
        return fact

    def create(
        self,
        text: str,
        category: str,
        source: str | None = None,
        submitted_by: str | None = None,
    ) -> Fact:
        """Publish a new fact directly.

        Returns:
            The created fact with its new id.

        Raises:
            ValidationError: If text or category is invalid.
            OperationFailed: If the write fails.
        """
        text = validate_text(text)
        category = validate_category(category, self.allow_custom_categories)
        submitted_by = validate_optional(submitted_by, "submittedBy")
        source = validate_optional(source, "source")

        fact = Fact(
            id=self.new_id(FACTS),
            text=text,
            category=category,
            submitted_by=submitted_by,
            source=source,
            created_at=_now(),
        )
        self.insert_fact(fact)
        logger.info("Created fact %s", fact.id)
        self._log_event("fact_created", fact_id=fact.id, category=fact.category)
        return fact

    def update(self, fact_id: str, **changes: Any) -> Fact:
        """Merge changes into a published fact.

        Args:
            fact_id: Id of the fact to change.
            **changes: Any of text, category, source, submitted_by.

        Raises:
            ValidationError: If a field is unknown or invalid.
            NotFound: If no fact has this id.
            OperationFailed: If the write fails.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        if "text" in changes:
            changes["text"] = validate_text(changes["text"])
        if "category" in changes:
            changes["category"] = validate_category(
                changes["category"], self.allow_custom_categories
            )
        for name in ("source", "submitted_by"):
            if name in changes:
                changes[name] = validate_optional(changes[name], name)

        wire_changes = {EDITABLE_FIELDS[name]: value for name, value in changes.items()}
        record = self.storage.update(FACTS, fact_id, wire_changes)
        if record is None:
            raise NotFound(FACTS, fact_id)

        logger.info("Updated fact %s", fact_id)
        self._log_event("fact_updated", fact_id=fact_id, fields=sorted(changes))
        return Fact.from_dict(record)

    def delete(self, fact_id: str) -> None:
        """Delete a published fact. Unknown ids are ignored."""
        if self.storage.delete(FACTS, fact_id):
            logger.info("Deleted fact %s", fact_id)
            self._log_event("fact_deleted", fact_id=fact_id)

    # Pending submissions

    def list_pending(self) -> list[SubmittedFact]:
        """List submissions waiting for moderation."""
        return self._load_submissions(self.storage.list(SUBMISSIONS))

    def get_pending(self, submission_id: str) -> SubmittedFact | None:
        """Get a pending submission by id."""
        record = self.storage.get(SUBMISSIONS, submission_id)
        if record is None:
            return None
        submissions = self._load_submissions([record])
        return submissions[0] if submissions else None

    def submit(
        self,
        text: str,
        category: str,
        submitted_by: str,
        source: str | None = None,
    ) -> SubmittedFact:
        """Add a public submission to the pending collection.

        Raises:
            ValidationError: If text, category or submitter is invalid.
            OperationFailed: If the write fails.
        """
        text = validate_text(text)
        category = validate_category(category, self.allow_custom_categories)
        submitted_by = validate_submitter(submitted_by)
        source = validate_optional(source, "source")

        submission = SubmittedFact(
            id=self.new_id(SUBMISSIONS),
            text=text,
            category=category,
            submitted_by=submitted_by,
            source=source,
            created_at=_now(),
        )
        self.storage.insert(SUBMISSIONS, submission.to_dict())
        logger.info("Received submission %s from %s", submission.id, submission.submitted_by)
        self._log_event(
            "fact_submitted",
            submission_id=submission.id,
            category=submission.category,
            submitted_by=submission.submitted_by,
        )
        return submission

    def remove_pending(self, submission_id: str) -> bool:
        """Remove a submission from the pending collection.

        Returns:
            True if it was there.
        """
        return self.storage.delete(SUBMISSIONS, submission_id)
