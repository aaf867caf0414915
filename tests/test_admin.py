"""Tests for the admin password gate and session."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from uselessfacts.activity_log import JSONLLogger
from uselessfacts.admin import DEFAULT_ADMIN_PASSWORD, AdminGate, AdminSession
from uselessfacts.errors import NotAuthorized, OperationFailed, ValidationError
from uselessfacts.storage import STORAGE_KEYS, LocalStore


@pytest.fixture
def store(tmp_path: Path) -> LocalStore:
    return LocalStore(tmp_path / "data.json")


@pytest.fixture
def gate(store: LocalStore) -> AdminGate:
    return AdminGate(store)


class TestCheckPassword:
    def test_fresh_store_uses_default(self, gate: AdminGate):
        """Without a stored password only the default is accepted."""
        assert gate.check_password("wrong") is False
        assert gate.check_password(DEFAULT_ADMIN_PASSWORD) is True

    def test_stored_password_replaces_default(self, gate: AdminGate, store: LocalStore):
        store.set_item(STORAGE_KEYS["ADMIN_PASSWORD"], "letmein")
        assert gate.check_password("letmein") is True
        assert gate.check_password(DEFAULT_ADMIN_PASSWORD) is False

    def test_configured_default(self, store: LocalStore):
        gate = AdminGate(store, default_password="from-config")
        assert gate.check_password("from-config") is True
        assert gate.check_password(DEFAULT_ADMIN_PASSWORD) is False

    def test_unreadable_store_falls_back_to_default(self, gate: AdminGate, store: LocalStore):
        store.path.write_text("not json")
        assert gate.check_password(DEFAULT_ADMIN_PASSWORD) is True

    def test_is_case_sensitive(self, gate: AdminGate):
        assert gate.check_password(DEFAULT_ADMIN_PASSWORD.lower()) is False


class TestSetPassword:
    def test_set_password_overwrites(self, gate: AdminGate, store: LocalStore):
        gate.set_password("abc")  # No length check here
        assert store.get_item(STORAGE_KEYS["ADMIN_PASSWORD"]) == "abc"
        assert gate.check_password("abc") is True

    def test_change_password_validates(self, gate: AdminGate):
        with pytest.raises(ValidationError, match="at least 6"):
            gate.change_password("short", "short")
        with pytest.raises(ValidationError, match="do not match"):
            gate.change_password("longenough", "different")
        assert gate.check_password(DEFAULT_ADMIN_PASSWORD) is True

    def test_change_password(self, gate: AdminGate):
        gate.change_password("newsecret", "newsecret")
        assert gate.check_password("newsecret") is True

    def test_write_failure_propagates(self):
        store = Mock(spec=LocalStore)
        store.set_item.side_effect = OperationFailed("read-only")
        with pytest.raises(OperationFailed):
            AdminGate(store).set_password("newsecret")

    def test_logs_password_change(self, store: LocalStore, tmp_path: Path):
        activity = JSONLLogger(log_dir=tmp_path / "logs")
        AdminGate(store, activity=activity).set_password("newsecret")
        assert "password_changed" in activity.log_path.read_text()
        assert "newsecret" not in activity.log_path.read_text()


class TestAdminSession:
    def test_starts_logged_out(self, gate: AdminGate):
        session = AdminSession(gate)
        assert session.authenticated is False
        with pytest.raises(NotAuthorized):
            session.require()

    def test_login_and_logout(self, gate: AdminGate):
        session = AdminSession(gate)
        assert session.login(DEFAULT_ADMIN_PASSWORD) is True
        session.require()  # Should not raise
        session.logout()
        with pytest.raises(NotAuthorized):
            session.require()

    def test_failed_login_clears_authentication(self, gate: AdminGate):
        session = AdminSession(gate, authenticated=True)
        assert session.login("wrong") is False
        assert session.authenticated is False

    def test_login_events_logged(self, store: LocalStore, tmp_path: Path):
        activity = JSONLLogger(log_dir=tmp_path / "logs")
        session = AdminSession(AdminGate(store, activity=activity))
        session.login("wrong")
        session.login(DEFAULT_ADMIN_PASSWORD)
        lines = activity.log_path.read_text().splitlines()
        assert '"event": "admin_login_failed"' in lines[0]
        assert '"event": "admin_login"' in lines[1]
