"""Configuration management for tasktui."""

import json
from pathlib import Path
from typing import Any, Optional

from platformdirs import user_config_dir
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from tasktui.adapters.sqlite.connection import default_db_path
from tasktui.models import SortKey
from tasktui.utils.logger import get_logger


class StorageConfig(BaseModel):
    """Storage configuration."""

    db_path: Optional[str] = Field(default=None)


class UIConfig(BaseModel):
    """UI configuration."""

    default_sort: SortKey = Field(default=SortKey.CREATED)
    date_format: str = Field(default="%Y-%m-%d")
    due_soon_days: int = Field(default=7, ge=1)


class Config(BaseModel):
    """Main configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    ui: UIConfig = Field(default_factory=UIConfig)


class ConfigManager:
    """Manages tasktui configuration."""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or Path(user_config_dir("tasktui"))
        self.config_file = self.config_dir / "config.json"
        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> Config:
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                return Config(**data)
            except (OSError, ValueError, TypeError, PydanticValidationError) as e:
                # If config is corrupted, return default
                get_logger().warning(
                    "ignoring unreadable config %s: %s", self.config_file, e
                )
                return Config()
        return Config()

    def save_config(self, config: Optional[Config] = None) -> None:
        """Save configuration to file."""
        if config is None:
            config = self.config

        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config.model_dump(mode="json"), f, indent=2)

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        keys = key.split(".")
        value: Any = self.config
        for k in keys:
            if isinstance(value, BaseModel):
                value = getattr(value, k, None)
            else:
                return None
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key and save it."""
        keys = key.split(".")
        data = self.config.model_dump(mode="json")
        target = data
        for k in keys[:-1]:
            if not isinstance(target.get(k), dict):
                raise KeyError(f"Unknown configuration section: {k}")
            target = target[k]
        if keys[-1] not in target:
            raise KeyError(f"Unknown configuration key: {key}")
        target[keys[-1]] = value

        self._config = Config(**data)
        self.save_config()

    def resolve_db_path(self, cli_path: str | Path | None = None) -> Path | str:
        """Pick the database path: CLI argument, then config, then default."""
        if cli_path:
            return cli_path if str(cli_path) == ":memory:" else Path(cli_path)
        if self.config.storage.db_path:
            return Path(self.config.storage.db_path).expanduser()
        return default_db_path()


def get_config_manager() -> ConfigManager:
    """Get a config manager for the current user."""
    return ConfigManager()
