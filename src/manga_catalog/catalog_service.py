"""Service helpers shared by the CLI and the web UI."""

import logging
from typing import Optional

import click

from .config import Settings, get_settings
from .constants import StorageBackend
from .models import CatalogStats, Entry
from .notifications import LogNotifier
from .storage import JsonFileStorage, MemoryStorage, Storage
from .store import EntryStore

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> Storage:
    """Create the storage backend selected in the config."""
    if settings.storage_backend == StorageBackend.MEMORY:
        logger.warning("Using in-memory storage; changes will not survive a restart")
        return MemoryStorage()
    return JsonFileStorage(settings.data_dir)


def open_store(settings: Optional[Settings] = None, notifier: Optional[LogNotifier] = None) -> EntryStore:
    """Create an entry store from settings and load the persisted collection."""
    if settings is None:
        settings = get_settings()

    store = EntryStore(
        build_storage(settings),
        notifier=notifier or LogNotifier(),
        key=settings.storage_key,
    )
    store.load()
    return store


def format_entry(entry: Entry) -> str:
    """One-line summary of an entry."""
    parts = [f"[{entry.rating.value}]", entry.name, f"({entry.category.value})"]
    if entry.last_position:
        parts.append(f"last: {entry.last_position}")
    if entry.view_date:
        parts.append(f"viewed: {entry.view_date.isoformat()}")
    return f"{entry.id}  " + " ".join(parts)


def print_entries(entries: list[Entry]) -> None:
    """Print a listing to the console."""
    if not entries:
        click.echo("No entries found.")
        return

    for entry in entries:
        click.echo(format_entry(entry))
        if entry.link:
            click.echo(f"    {entry.link}")
    click.echo(f"\n{len(entries)} entries")


def print_stats(stats: CatalogStats) -> None:
    """Print collection statistics to the console."""
    click.echo("=== Collection Stats ===")
    click.echo(f"Total entries: {stats.total}")
    click.echo(f"Added in the last 30 days: {stats.recent_count}")

    click.echo("\nBy category:")
    if not stats.by_category:
        click.echo("  (none)")
    for category, count in stats.by_category.items():
        click.echo(f"  {category.value}: {count}")

    click.echo("\nBy rating:")
    if not stats.by_rating:
        click.echo("  (none)")
    for rating, count in stats.by_rating:
        click.echo(f"  {rating.value:>18}  {count}")
