"""Bookmarks, likes and dislikes kept in the local store."""

import logging

from .errors import OperationFailed
from .models import Fact
from .storage import STORAGE_KEYS, LocalStore

logger = logging.getLogger(__name__)


class Preferences:
    """Per-user lists of bookmarked, liked and disliked fact ids.

    A fact is never both liked and disliked: setting one clears the other.
    """

    def __init__(self, store: LocalStore) -> None:
        self.store = store

    def _ids(self, key: str) -> list[str]:
        try:
            ids = self.store.get_item(STORAGE_KEYS[key], [])
        except OperationFailed as e:
            logger.error("Failed to read %s: %s", STORAGE_KEYS[key], e)
            return []
        if not isinstance(ids, list):
            return []
        return [str(i) for i in ids]

    def _toggle(self, key: str, fact_id: str, opposite: str | None = None) -> bool:
        with self.store.batch():
            ids = self._ids(key)
            if fact_id in ids:
                ids.remove(fact_id)
                active = False
            else:
                ids.append(fact_id)
                active = True
            self.store.set_item(STORAGE_KEYS[key], ids)

            if active and opposite is not None:
                others = self._ids(opposite)
                if fact_id in others:
                    others.remove(fact_id)
                    self.store.set_item(STORAGE_KEYS[opposite], others)
        return active

    def bookmarks(self) -> list[str]:
        return self._ids("BOOKMARKS")

    def liked(self) -> list[str]:
        return self._ids("LIKED")

    def disliked(self) -> list[str]:
        return self._ids("DISLIKED")

    def toggle_bookmark(self, fact_id: str) -> bool:
        """Add or remove a bookmark. Returns True if now bookmarked."""
        return self._toggle("BOOKMARKS", fact_id)

    def toggle_like(self, fact_id: str) -> bool:
        """Like or un-like a fact. Returns True if now liked."""
        return self._toggle("LIKED", fact_id, opposite="DISLIKED")

    def toggle_dislike(self, fact_id: str) -> bool:
        """Dislike or un-dislike a fact. Returns True if now disliked."""
        return self._toggle("DISLIKED", fact_id, opposite="LIKED")

    def bookmarked_facts(self, facts: list[Fact]) -> list[Fact]:
        """Filter facts down to the bookmarked ones, keeping their order."""
        bookmarked = set(self.bookmarks())
        return [f for f in facts if f.id in bookmarked]
