"""Health check script for Docker container."""

import sys
import logging
from pathlib import Path
from typing import Optional

from manga_catalog.catalog_service import build_storage
from manga_catalog.config import Settings
from manga_catalog.notifications import LogNotifier
from manga_catalog.store import EntryStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run_checks(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """Check that configuration loads and the stored collection parses.

    Returns:
        tuple: (healthy, messages)
    """
    try:
        settings = Settings(config_path)
    except Exception as e:
        return False, [f"[ERROR] UNHEALTHY: Failed to load configuration: {e}"]

    try:
        store = EntryStore(build_storage(settings), notifier=LogNotifier(), key=settings.storage_key)
        store.load()
    except Exception as e:
        return False, [f"[ERROR] UNHEALTHY: Storage check failed: {e}"]

    if store.load_error is not None:
        return False, [
            f"[ERROR] UNHEALTHY: Saved collection '{settings.storage_key}' is unreadable",
            f"   {store.load_error}",
        ]

    return True, [f"[OK] HEALTHY: {len(store)} entries in '{settings.storage_key}'"]


def main():
    """Exit 0 if healthy, 1 otherwise."""
    healthy, messages = run_checks()
    for message in messages:
        if healthy:
            logger.info(message)
        else:
            logger.error(message)
    sys.exit(0 if healthy else 1)


if __name__ == "__main__":
    main()
