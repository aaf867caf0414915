"""Shared-password gate for the admin surface."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import NotAuthorized, OperationFailed
from .storage import STORAGE_KEYS, LocalStore
from .validation import validate_new_password

if TYPE_CHECKING:
    from .activity_log import JSONLLogger

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_PASSWORD = "JR56OPsh#"


class AdminGate:
    """Checks and stores the admin password.

    The password is kept in plain text under its own key in the local
    store. Until one is set, the default password is accepted.
    """

    def __init__(
        self,
        store: LocalStore,
        default_password: str = DEFAULT_ADMIN_PASSWORD,
        activity: JSONLLogger | None = None,
    ) -> None:
        self.store = store
        self.default_password = default_password
        self.activity = activity

    def _stored_password(self) -> str:
        try:
            stored = self.store.get_item(STORAGE_KEYS["ADMIN_PASSWORD"])
        except OperationFailed as e:
            logger.error("Error checking admin password: %s", e)
            stored = None
        return stored or self.default_password

    def check_password(self, candidate: str) -> bool:
        """Check a candidate against the stored (or default) password."""
        return candidate == self._stored_password()

    def set_password(self, new_password: str) -> None:
        """Overwrite the stored password.

        Length and confirmation checks are the caller's job; see
        change_password.

        Raises:
            OperationFailed: If the store cannot be written.
        """
        self.store.set_item(STORAGE_KEYS["ADMIN_PASSWORD"], new_password)
        logger.info("Admin password changed")
        if self.activity is not None:
            self.activity.log("password_changed")

    def change_password(self, new_password: str, confirm: str) -> None:
        """Validate a new password and its confirmation, then store it.

        Raises:
            ValidationError: If too short or the confirmation does not match.
        """
        validate_new_password(new_password, confirm)
        self.set_password(new_password)


class AdminSession:
    """Authentication state for one admin for the lifetime of a session."""

    def __init__(self, gate: AdminGate, authenticated: bool = False) -> None:
        self.gate = gate
        self.authenticated = authenticated

    def login(self, password: str) -> bool:
        """Try to log in. Returns True on success."""
        self.authenticated = self.gate.check_password(password)
        if self.gate.activity is not None:
            event = "admin_login" if self.authenticated else "admin_login_failed"
            self.gate.activity.log(event)
        if not self.authenticated:
            logger.warning("Rejected admin login attempt")
        return self.authenticated

    def logout(self) -> None:
        self.authenticated = False

    def require(self) -> None:
        """Raise NotAuthorized unless logged in."""
        if not self.authenticated:
            raise NotAuthorized("Admin login required")
