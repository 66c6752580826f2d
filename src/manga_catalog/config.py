"""Configuration management using Pydantic models."""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .constants import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_DATA_DIR,
    DEFAULT_WEB_UI_HOST,
    DEFAULT_WEB_UI_PORT,
    DOCKER_CONFIG_PATH,
    STORAGE_KEY,
    StorageBackend,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class StorageConfig(BaseModel):
    """Where the collection is persisted."""
    backend: StorageBackend = StorageBackend.FILE
    data_dir: str = DEFAULT_DATA_DIR
    key: str = Field(default=STORAGE_KEY, min_length=1)


class WebConfig(BaseModel):
    """Web UI settings."""
    host: str = DEFAULT_WEB_UI_HOST
    port: int = Field(default=DEFAULT_WEB_UI_PORT, ge=1, le=65535)


class Config(BaseModel):
    """Root configuration model."""
    storage: StorageConfig = Field(default_factory=StorageConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    log_level: str = "INFO"

    @field_validator("storage", "web", mode="before")
    @classmethod
    def ensure_section(cls, v):
        """Treat an empty YAML section as defaults."""
        return v if v is not None else {}

    @field_validator("log_level", mode="before")
    @classmethod
    def check_log_level(cls, v):
        """Accept log levels in any case."""
        level = str(v or "INFO").upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


class Settings:
    """Application settings loaded from config.yaml."""

    def __init__(self, config_path: Optional[Path] = None):
        """Load and validate configuration."""
        self.config_path = Path(config_path) if config_path else self._get_config_path()

        if not self.config_path.exists():
            self._create_config_template()

        self._load_config()

    def _get_config_path(self) -> Path:
        """Get config file path based on environment."""
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override)
        if os.path.exists("/.dockerenv"):
            return Path(DOCKER_CONFIG_PATH)
        return Path(DEFAULT_CONFIG_PATH)

    def _create_config_template(self) -> None:
        """Create config template from example."""
        example_path = Path("config.example.yaml")
        if example_path.exists():
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy(example_path, self.config_path)
            logger.info(f"✅ Created config template: {self.config_path}")

    def _load_config(self) -> None:
        """Load configuration from YAML using Pydantic."""
        try:
            if self.config_path.exists():
                with open(self.config_path, "r", encoding="utf-8") as f:
                    raw_config = yaml.safe_load(f) or {}
                logger.debug(f"Loaded configuration from {self.config_path}")
            else:
                logger.debug(f"No config at {self.config_path}, using defaults")
                raw_config = {}

            config = Config(**raw_config)
        except Exception as e:
            logger.error(f"❌ Failed to load config: {e}")
            raise

        self.config = config
        self.storage_backend = config.storage.backend
        self.data_dir = Path(config.storage.data_dir)
        self.storage_key = config.storage.key
        self.web_host = config.web.host
        self.web_port = config.web.port
        self.log_level = config.log_level


# Singleton cache for settings
_SETTINGS_SINGLETON = None

def get_settings() -> Settings:
    """Get (cached) application settings singleton."""
    global _SETTINGS_SINGLETON
    if _SETTINGS_SINGLETON is None:
        _SETTINGS_SINGLETON = Settings()
    return _SETTINGS_SINGLETON

def reload_settings() -> Settings:
    """Force reload of application settings singleton."""
    global _SETTINGS_SINGLETON
    _SETTINGS_SINGLETON = Settings()
    return _SETTINGS_SINGLETON
