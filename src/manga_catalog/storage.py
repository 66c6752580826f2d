"""Key-value storage backends for the serialized catalog."""

import logging
from pathlib import Path
from typing import Optional, Protocol

from .errors import StorageError

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Synchronous raw text storage addressed by key."""

    def read_raw(self, key: str) -> Optional[str]:
        ...

    def write_raw(self, key: str, text: str) -> None:
        ...


class JsonFileStorage:
    """Stores each key as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path):
        """Initialize storage rooted at directory (created on first write)."""
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Return the file backing a key."""
        return self.directory / f"{key}.json"

    def read_raw(self, key: str) -> Optional[str]:
        """Return the stored text, or None if nothing was saved yet."""
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def write_raw(self, key: str, text: str) -> None:
        """Replace the stored text for a key."""
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(text)
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Saved {len(text)} bytes to {path}")


class MemoryStorage:
    """Process-local storage, used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def read_raw(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def write_raw(self, key: str, text: str) -> None:
        self.data[key] = text
