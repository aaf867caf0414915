"""Configuration loader.

Loads settings from ~/.uselessfacts/config.json, lets environment
variables override them, and builds the storage backend they select.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .admin import DEFAULT_ADMIN_PASSWORD
from .storage import FactStorage, LocalFactStorage, LocalStore, RemoteFactStorage, SQLiteFactStorage
from .storage.remote import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

APP_DIR = Path.home() / ".uselessfacts"
DEFAULT_CONFIG_PATH = APP_DIR / "config.json"

BACKENDS = ("local", "sqlite", "remote")


@dataclass
class FactsConfig:
    """Configuration for the facts service.

    Attributes:
        backend: Storage backend for the fact collections: local, sqlite or remote.
        data_path: JSON file for the local store. Always used for
            preferences and the admin password, whatever the backend.
        db_path: SQLite database file for the sqlite backend.
        remote_url: Project URL of the remote store.
        remote_key: API key of the remote store.
        remote_timeout: Seconds before a remote call is abandoned.
        allow_custom_categories: Accept categories outside the built-in set.
        default_admin_password: Password accepted until one is set.
        secret_key: Key used to sign web session cookies.
        log_dir: Directory for the activity log.
    """

    backend: str = "local"
    data_path: Path | None = None
    db_path: Path | None = None
    remote_url: str = ""
    remote_key: str = ""
    remote_timeout: float = DEFAULT_TIMEOUT
    allow_custom_categories: bool = False
    default_admin_password: str = DEFAULT_ADMIN_PASSWORD
    secret_key: str = "uselessfacts-dev-secret-change-me"
    log_dir: Path | None = None

    def __post_init__(self) -> None:
        """Validate config and set defaults."""
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {', '.join(BACKENDS)}")

        if self.backend == "remote" and not self.remote_url:
            raise ValueError("remote backend requires remote_url")

        if self.remote_timeout <= 0:
            raise ValueError("remote_timeout must be positive")

        if self.data_path is None:
            self.data_path = APP_DIR / "data.json"

        if self.db_path is None:
            self.db_path = APP_DIR / "facts.db"

        if self.log_dir is None:
            self.log_dir = APP_DIR / "logs"


def load_config(
    config_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> FactsConfig:
    """Load FactsConfig from a JSON file and the environment.

    The config file should have this structure:
    ```json
    {
      "storage": {
        "backend": "remote",
        "data_path": "~/.uselessfacts/data.json",
        "db_path": "~/.uselessfacts/facts.db",
        "remote": {"url": "https://xyz.supabase.co", "key": "...", "timeout": 10}
      },
      "categories": {"allow_custom": false},
      "admin": {"default_password": "..."},
      "web": {"secret_key": "..."},
      "log_dir": "~/.uselessfacts/logs"
    }
    ```

    Environment variables win over the file: FACTS_BACKEND,
    FACTS_DATA_PATH, FACTS_DB_PATH, SUPABASE_URL, SUPABASE_ANON_KEY,
    FACTS_ADMIN_PASSWORD, FACTS_SECRET_KEY, FACTS_LOG_DIR.

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.
        environ: Environment to read. Uses os.environ if None.

    Returns:
        FactsConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    env = os.environ if environ is None else environ

    data: dict[str, Any] = {}
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
    else:
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        except OSError as e:
            logger.warning("Cannot read %s: %s. Using defaults.", path, e)

    if not isinstance(data, dict):
        logger.warning("Config in %s is not an object. Using defaults.", path)
        data = {}

    settings = _parse_config(data)
    settings.update(_parse_env(env))
    return FactsConfig(**settings)


def _path(value: Any) -> Path | None:
    if not isinstance(value, str) or not value:
        return None
    return Path(value).expanduser()


def _parse_config(data: dict[str, Any]) -> dict[str, Any]:
    """Parse config dictionary into FactsConfig keyword arguments.

    Invalid values are skipped so the defaults apply.
    """
    settings: dict[str, Any] = {}

    storage = data.get("storage", {})
    if not isinstance(storage, dict):
        storage = {}

    backend = storage.get("backend")
    if backend in BACKENDS:
        settings["backend"] = backend

    for key in ("data_path", "db_path"):
        path = _path(storage.get(key))
        if path is not None:
            settings[key] = path

    remote = storage.get("remote", {})
    if isinstance(remote, dict):
        if isinstance(remote.get("url"), str):
            settings["remote_url"] = remote["url"]
        if isinstance(remote.get("key"), str):
            settings["remote_key"] = remote["key"]
        timeout = remote.get("timeout")
        if isinstance(timeout, (int, float)) and timeout > 0:
            settings["remote_timeout"] = float(timeout)

    categories = data.get("categories", {})
    if isinstance(categories, dict) and isinstance(categories.get("allow_custom"), bool):
        settings["allow_custom_categories"] = categories["allow_custom"]

    admin = data.get("admin", {})
    if isinstance(admin, dict) and isinstance(admin.get("default_password"), str):
        settings["default_admin_password"] = admin["default_password"]

    web = data.get("web", {})
    if isinstance(web, dict) and isinstance(web.get("secret_key"), str):
        settings["secret_key"] = web["secret_key"]

    log_dir = _path(data.get("log_dir"))
    if log_dir is not None:
        settings["log_dir"] = log_dir

    return settings


def _parse_env(env: Any) -> dict[str, Any]:
    """Read overrides from environment variables."""
    settings: dict[str, Any] = {}

    if env.get("FACTS_BACKEND"):
        settings["backend"] = env["FACTS_BACKEND"]
    if env.get("FACTS_DATA_PATH"):
        settings["data_path"] = Path(env["FACTS_DATA_PATH"]).expanduser()
    if env.get("FACTS_DB_PATH"):
        settings["db_path"] = Path(env["FACTS_DB_PATH"]).expanduser()
    if env.get("SUPABASE_URL"):
        settings["remote_url"] = env["SUPABASE_URL"]
    if env.get("SUPABASE_ANON_KEY"):
        settings["remote_key"] = env["SUPABASE_ANON_KEY"]
    if env.get("FACTS_ADMIN_PASSWORD"):
        settings["default_admin_password"] = env["FACTS_ADMIN_PASSWORD"]
    if env.get("FACTS_SECRET_KEY"):
        settings["secret_key"] = env["FACTS_SECRET_KEY"]
    if env.get("FACTS_LOG_DIR"):
        settings["log_dir"] = Path(env["FACTS_LOG_DIR"]).expanduser()

    return settings


def save_config(config: FactsConfig, config_path: Path | None = None) -> None:
    """Save FactsConfig to a JSON file.

    Args:
        config: The config to save.
        config_path: Path to write to. Uses DEFAULT_CONFIG_PATH if None.
    """
    path = config_path or DEFAULT_CONFIG_PATH

    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    storage: dict[str, Any] = {
        "backend": config.backend,
        "data_path": str(config.data_path),
        "db_path": str(config.db_path),
    }
    if config.remote_url:
        storage["remote"] = {
            "url": config.remote_url,
            "key": config.remote_key,
            "timeout": config.remote_timeout,
        }

    data: dict[str, Any] = {
        "storage": storage,
        "categories": {"allow_custom": config.allow_custom_categories},
        "log_dir": str(config.log_dir),
    }
    if config.default_admin_password != DEFAULT_ADMIN_PASSWORD:
        data["admin"] = {"default_password": config.default_admin_password}

    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise


def create_local_store(config: FactsConfig) -> LocalStore:
    """Build the JSON-file store holding preferences and the admin password."""
    assert config.data_path is not None
    return LocalStore(config.data_path)


def create_storage(config: FactsConfig, local_store: LocalStore | None = None) -> FactStorage:
    """Build the storage backend selected by config.backend."""
    if config.backend == "sqlite":
        assert config.db_path is not None
        storage = SQLiteFactStorage(config.db_path)
        storage.init_db()
        return storage

    if config.backend == "remote":
        return RemoteFactStorage(
            config.remote_url,
            config.remote_key,
            timeout=config.remote_timeout,
        )

    return LocalFactStorage(local_store or create_local_store(config))
