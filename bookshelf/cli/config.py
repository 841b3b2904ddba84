"""Configuration management for the CLI.

The configuration supplies a single value, the location of the catalog
file. It is resolved once at startup and passed to whatever needs it.
"""

import logging
import os
from pathlib import Path
from typing import Any

import msgspec
import yaml

from bookshelf.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.yaml"
DB_ENV_VAR = "BOOKSHELF_DB"


def default_config_dir() -> Path:
    """Return the directory holding ``config.yaml``."""
    xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config_home / "bookshelf"


def default_db_path() -> Path:
    """Return the default catalog location."""
    xdg_data_home = Path(
        os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
    )
    return xdg_data_home / "bookshelf" / "shelf.db"


class Config(msgspec.Struct, kw_only=True):
    """Configuration for the application."""

    db: str = msgspec.field(default_factory=lambda: str(default_db_path()))

    @property
    def db_path(self) -> Path:
        """Catalog location with ``~`` expanded."""
        return Path(self.db).expanduser()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        try:
            return msgspec.convert(data, cls)
        except msgspec.ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Error reading config file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    def to_file(self, path: Path) -> None:
        """Write this configuration to a YAML file."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                yaml.safe_dump(msgspec.to_builtins(self), f, default_flow_style=False)
        except OSError as e:
            raise ConfigError(f"Couldn't write config file {path}: {e}") from e

    def with_env_overrides(self) -> "Config":
        """Return a copy with environment variables applied."""
        if db := os.environ.get(DB_ENV_VAR):
            return msgspec.structs.replace(self, db=db)
        return self

    @classmethod
    def get_or_default(cls, path: Path | None = None) -> "Config":
        """Load the config at ``path``, writing a default one first if missing.

        Args:
            path: Config file location, defaults to
                ``$XDG_CONFIG_HOME/bookshelf/config.yaml``.
        """
        path = path or default_config_dir() / CONFIG_FILE_NAME

        if path.exists():
            logger.debug(f"Loading config from {path}")
            config = cls.from_file(path)
        else:
            logger.info(f"Writing default config to {path}")
            config = cls()
            config.to_file(path)

        return config.with_env_overrides()
