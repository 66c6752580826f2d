"""Constants used throughout the application."""

from enum import Enum


class StorageBackend(str, Enum):
    """Storage backend options."""

    FILE = "file"
    MEMORY = "memory"


class NoticeKind(str, Enum):
    """Notification kinds."""

    INFO = "info"
    ERROR = "error"


# Storage
STORAGE_KEY = "mangas"
DEFAULT_DATA_DIR = "data"
DEFAULT_CONFIG_PATH = "data/config.yaml"
DOCKER_CONFIG_PATH = "/app/data/config.yaml"
CONFIG_ENV_VAR = "MANGA_CATALOG_CONFIG"

# Stats
RECENT_WINDOW_DAYS = 30

# Default values
DEFAULT_WEB_UI_PORT = 8080
DEFAULT_WEB_UI_HOST = "0.0.0.0"
NOTICE_HISTORY_SIZE = 50
MAX_ID_ATTEMPTS = 5
