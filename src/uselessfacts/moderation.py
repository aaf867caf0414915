"""Approve/reject workflow moving submissions into the published facts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import NotFound, OperationFailed
from .models import FACTS, SUBMISSIONS, Fact
from .repository import FactRepository

if TYPE_CHECKING:
    from .admin import AdminSession

logger = logging.getLogger(__name__)


class ModerationWorkflow:
    """Promotes or discards pending submissions.

    A submission is either pending, published (copied into the facts
    collection under a new id and removed from pending) or rejected
    (removed without a trace). Published facts never go back to pending.
    """

    def __init__(
        self,
        repository: FactRepository,
        session: AdminSession | None = None,
    ) -> None:
        """Initialize the workflow.

        Args:
            repository: Repository holding both collections.
            session: Admin session that must be logged in before any
                transition. None skips the check (trusted callers).
        """
        self.repository = repository
        self.session = session

    def _require_admin(self) -> None:
        if self.session is not None:
            self.session.require()

    def approve(self, submission_id: str) -> Fact:
        """Publish a pending submission.

        The new fact keeps the submission's text, category, submitter,
        source and creation time, and gets a fresh id. Publishing and
        removing from pending run in one storage transaction; on backends
        without transactions a failure of the second step leaves the
        submission both published and pending.

        Returns:
            The newly published fact.

        Raises:
            NotAuthorized: If the admin session is not logged in.
            NotFound: If no pending submission has this id.
            OperationFailed: If either write fails.
        """
        self._require_admin()

        submission = self.repository.get_pending(submission_id)
        if submission is None:
            raise NotFound(SUBMISSIONS, submission_id)

        fact = Fact(
            id=self.repository.new_id(FACTS, reserved={submission_id}),
            text=submission.text,
            category=submission.category,
            submitted_by=submission.submitted_by,
            source=submission.source,
            created_at=submission.created_at,
        )

        with self.repository.storage.transaction():
            self.repository.insert_fact(fact)
            try:
                self.repository.remove_pending(submission_id)
            except OperationFailed:
                logger.error(
                    "Published fact %s but could not remove submission %s from pending",
                    fact.id,
                    submission_id,
                )
                raise

        logger.info("Approved submission %s as fact %s", submission_id, fact.id)
        if self.repository.activity is not None:
            self.repository.activity.log(
                "fact_approved", submission_id=submission_id, fact_id=fact.id
            )
        return fact

    def reject(self, submission_id: str) -> None:
        """Discard a pending submission. Unknown ids are ignored.

        Raises:
            NotAuthorized: If the admin session is not logged in.
            OperationFailed: If the write fails.
        """
        self._require_admin()

        if self.repository.remove_pending(submission_id):
            logger.info("Rejected submission %s", submission_id)
            if self.repository.activity is not None:
                self.repository.activity.log("fact_rejected", submission_id=submission_id)

    def approve_all(self) -> int:
        """Approve every pending submission. Returns how many were published."""
        count = 0
        for submission in self.repository.list_pending():
            self.approve(submission.id)
            count += 1
        return count

    def reject_all(self) -> int:
        """Reject every pending submission. Returns how many were removed."""
        count = 0
        for submission in self.repository.list_pending():
            self.reject(submission.id)
            count += 1
        return count
