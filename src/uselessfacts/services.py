"""Wiring of storage, repository and admin components from a config."""

from dataclasses import dataclass

from .activity_log import JSONLLogger
from .admin import AdminGate, AdminSession
from .config import FactsConfig, create_local_store, create_storage
from .moderation import ModerationWorkflow
from .preferences import Preferences
from .repository import FactRepository
from .storage import FactStorage, LocalStore


@dataclass
class Services:
    """Everything a front end (web or CLI) needs, built once per process."""

    config: FactsConfig
    local_store: LocalStore
    storage: FactStorage
    repository: FactRepository
    gate: AdminGate
    preferences: Preferences
    activity: JSONLLogger | None = None

    def workflow(self, session: AdminSession | None = None) -> ModerationWorkflow:
        """Get a moderation workflow, gated by session when given."""
        return ModerationWorkflow(self.repository, session=session)

    def admin_session(self, authenticated: bool = False) -> AdminSession:
        return AdminSession(self.gate, authenticated=authenticated)

    def close(self) -> None:
        self.storage.close()


def build_services(
    config: FactsConfig,
    activity: JSONLLogger | None = None,
    storage: FactStorage | None = None,
) -> Services:
    """Build the service graph for a config.

    Args:
        config: Loaded configuration.
        activity: Activity logger for domain events, or None for none.
        storage: Storage backend to use instead of the configured one.
    """
    local_store = create_local_store(config)
    if storage is None:
        storage = create_storage(config, local_store)

    return Services(
        config=config,
        local_store=local_store,
        storage=storage,
        repository=FactRepository(
            storage,
            allow_custom_categories=config.allow_custom_categories,
            activity=activity,
        ),
        gate=AdminGate(
            local_store,
            default_password=config.default_admin_password,
            activity=activity,
        ),
        preferences=Preferences(local_store),
        activity=activity,
    )
