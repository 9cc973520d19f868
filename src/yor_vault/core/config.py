"""
Configuration for the Yor vault.

Paths that used to be read from ambient process state (home directory,
default database) live in an explicit VaultConfig passed to the engine and
environment.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

HOME_ENV_VAR = "YOR_HOME"
DEFAULT_DB_NAME = "default"


def _default_home() -> Path:
    return Path(os.getenv(HOME_ENV_VAR) or Path.home() / ".yor").expanduser()


@dataclass(frozen=True)
class VaultConfig:
    """Vault configuration."""

    # Root of the vault environment (~/.yor)
    home: Path = field(default_factory=_default_home)

    # Database used when no name is selected in the config store
    default_db_name: str = DEFAULT_DB_NAME

    # Where retrieved file items are written (defaults to <home>/files)
    file_env: Optional[Path] = None

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "VaultConfig":
        """Build the config after loading a .env file (if any).

        Without an explicit path the .env is looked up from the current
        working directory upwards. Variables already set in the environment
        win over the file.
        """
        dotenv_path = dotenv_path or find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path)
        return cls()

    def with_file_env(self, file_env: Optional[Path]) -> "VaultConfig":
        return replace(self, file_env=Path(file_env) if file_env else None)

    @property
    def db_dir(self) -> Path:
        """Directory holding one JSON file per database."""
        return self.home / "db"

    @property
    def files_dir(self) -> Path:
        """Directory retrieved files are written to."""
        return self.file_env if self.file_env is not None else self.home / "files"

    @property
    def logs_dir(self) -> Path:
        """Directory for audit logs."""
        return self.home / "logs"

    @property
    def config_path(self) -> Path:
        """Path to the config store (selected db_name, file_env)."""
        return self.home / "config"
