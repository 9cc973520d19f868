# Vault Environment
# Directory layout and database lifecycle:
#
#   <home>/            (~/.yor, or $YOR_HOME)
#     config           config store: db_name (selected database), file_env
#     db/<name>        one DictStore per database
#     files/           retrieved file items
#     logs/            audit logs
#
# Databases must be created before use (MissingDatabase otherwise); only the
# default database is created on initialize().

import logging
import shutil
from pathlib import Path
from typing import List, Optional

from ..vault.exceptions import (
    DatabaseExists,
    EnvironmentNotFound,
    MissingDatabase,
)
from .audit_log import EventSeverity, EventType, log_vault_event
from .config import VaultConfig
from .store import DictStore

logger = logging.getLogger(__name__)

# Config store keys
CONFIG_DB_NAME = "db_name"
CONFIG_FILE_ENV = "file_env"

# Directories that `clear` may wipe
CLEARABLE_ENVIRONMENTS = ("db", "files")


class VaultEnvironment:
    """Owns the vault directory layout and the config store.

    Args:
        config: Vault configuration. Defaults to VaultConfig().
    """

    def __init__(self, config: Optional[VaultConfig] = None):
        self.config = config or VaultConfig()
        self._config_store: Optional[DictStore] = None

    # ── Setup ────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """Create the directory tree, config store and default database."""
        for path in (self.config.home, self.config.db_dir, self.config.files_dir, self.config.logs_dir):
            path.mkdir(parents=True, exist_ok=True)

        store = self.config_store
        if not store.exists(CONFIG_DB_NAME):
            store.set(CONFIG_DB_NAME, self.config.default_db_name)
            log_vault_event(
                event_type=EventType.ENVIRONMENT_INITIALIZED,
                severity=EventSeverity.INFO,
                message=f"Vault environment initialized: {self.config.home}",
                details={"home": str(self.config.home)}
            )
        if not store.exists(CONFIG_FILE_ENV):
            store.set(CONFIG_FILE_ENV, str(self.config.files_dir))

        default_path = self.get_db_path(self.config.default_db_name)
        if not default_path.exists():
            DictStore.open_or_create(default_path)
            logger.debug("Created default database at %s", default_path)

    @property
    def config_store(self) -> DictStore:
        if self._config_store is None:
            self._config_store = DictStore.open_or_create(self.config.config_path)
        return self._config_store

    def settings(self) -> VaultConfig:
        """The config with file_env resolved from the config store."""
        file_env = self.config_store.get(CONFIG_FILE_ENV)
        if file_env and self.config.file_env is None:
            return self.config.with_file_env(Path(file_env))
        return self.config

    # ── Databases ────────────────────────────────────────────────────

    def get_db_path(self, name: str) -> Path:
        """Path of the database file with the given name."""
        if not name or Path(name).name != name or name in (".", ".."):
            raise MissingDatabase(f"Invalid database name: {name!r}")
        return self.config.db_dir / name

    def db_exists(self, name: str) -> bool:
        return self.get_db_path(name).is_file()

    def current_db_name(self) -> str:
        return self.config_store.get(CONFIG_DB_NAME, self.config.default_db_name)

    def create_db(self, name: str) -> DictStore:
        path = self.get_db_path(name)
        if path.exists():
            raise DatabaseExists(f"It looks like database: {name} is already created.")
        store = DictStore.open_or_create(path)
        log_vault_event(
            event_type=EventType.DATABASE_CREATED,
            severity=EventSeverity.INFO,
            message=f"Database created: {name}",
            details={"db": name}
        )
        return store

    def open_db(self, name: Optional[str] = None) -> DictStore:
        """Open a database (the selected one if name is None)."""
        name = name or self.current_db_name()
        if not self.db_exists(name):
            raise MissingDatabase(
                f"Database: {name} not found. Consider creating it using `create`."
            )
        return DictStore.open_existing(self.get_db_path(name))

    def delete_db(self, name: str) -> None:
        path = self.get_db_path(name)
        if not path.is_file():
            raise MissingDatabase(f"Database {name} doesn't exist at all")
        path.unlink()
        log_vault_event(
            event_type=EventType.DATABASE_DELETED,
            severity=EventSeverity.INFO,
            message=f"Database deleted: {name}",
            details={"db": name}
        )

    def set_default_db(self, name: str) -> None:
        if not self.db_exists(name):
            raise MissingDatabase(
                f"Database: {name} not found, perhaps it doesn't exist at all?"
            )
        self.config_store.set(CONFIG_DB_NAME, name)
        log_vault_event(
            event_type=EventType.DATABASE_SELECTED,
            severity=EventSeverity.INFO,
            message=f"Database selected: {name}",
            details={"db": name}
        )

    def list_databases(self) -> List[str]:
        if not self.config.db_dir.is_dir():
            return []
        return sorted(p.name for p in self.config.db_dir.iterdir() if p.is_file() and not p.name.endswith(".tmp"))

    # ── Files ────────────────────────────────────────────────────────

    def list_files(self) -> List[str]:
        files_dir = self.settings().files_dir
        if not files_dir.is_dir():
            return []
        return sorted(p.name for p in files_dir.iterdir() if p.is_file())

    def clear(self, env_name: str) -> None:
        """Wipe one environment directory (db or files) and recreate it empty."""
        if env_name == "db":
            target = self.config.db_dir
        elif env_name == "files":
            target = self.settings().files_dir
        else:
            raise EnvironmentNotFound(f"Cannot clear environment: `{env_name}`. Not found")

        if not target.is_dir():
            raise EnvironmentNotFound(f"Cannot clear environment: `{env_name}`. Not found")

        # Delete & recreate the directory instead of deleting every file
        shutil.rmtree(target)
        target.mkdir(parents=True, exist_ok=True)

        log_vault_event(
            event_type=EventType.ENVIRONMENT_CLEARED,
            severity=EventSeverity.ALERT,
            message=f"Environment cleared: {env_name}",
            details={"environment": env_name}
        )
