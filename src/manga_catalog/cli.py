"""Command-line interface for the manga catalog."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .catalog_service import format_entry, open_store, print_entries, print_stats
from .config import LOG_LEVELS, Settings
from .constants import CONFIG_ENV_VAR
from .errors import CatalogError, EntryNotFoundError, EntryValidationError
from .models import Category, Rating
from .query import SortDirection, SortKey, ViewCriteria, view
from .stats import summarize
from .store import EntryStore

logger = logging.getLogger(__name__)

CATEGORY_CHOICES = [c.value for c in Category]
RATING_CHOICES = [r.value for r in Rating]
SORT_CHOICES = [k.value for k in SortKey]
DATE_FORMATS = ["%Y-%m-%d"]


def setup_logging(level: str):
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )


def _open(ctx: click.Context) -> EntryStore:
    """Load settings and the store, warning if the saved collection was unreadable."""
    try:
        settings = Settings(ctx.obj.get("config_path"))
    except Exception as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(ctx.obj.get("log_level") or settings.log_level)
    ctx.obj["settings"] = settings

    store = open_store(settings)
    if store.load_error is not None:
        click.echo(f"Warning: saved collection could not be loaded ({store.load_error})", err=True)
    return store


def _fail(message: str, exit_code: int = 1):
    click.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar=CONFIG_ENV_VAR,
    help="Path to config.yaml",
)
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS)),
    default=None,
    help="Logging level (overrides config)",
)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], log_level: Optional[str]):
    """Track and rate your manga collection."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_level"] = log_level


@main.command()
@click.argument("name")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES), default=Category.MANGA.value, help="Category")
@click.option("--rating", type=click.Choice(RATING_CHOICES), default=Rating.B.value, help="Rating grade")
@click.option("--link", default=None, help="Link to where you read it")
@click.option("--last-position", default=None, help="Last chapter or episode read")
@click.option("--view-date", type=click.DateTime(formats=DATE_FORMATS), default=None, help="Date viewed (YYYY-MM-DD)")
@click.pass_context
def add(ctx, name, category, rating, link, last_position, view_date):
    """Add a new entry to the collection."""
    store = _open(ctx)
    draft = {
        "name": name,
        "category": category,
        "rating": rating,
        "link": link,
        "last_position": last_position,
        "view_date": view_date.date() if view_date else None,
    }
    try:
        entry = store.add(draft)
    except EntryValidationError as e:
        _fail(f"invalid entry: {e}")
    except CatalogError as e:
        _fail(str(e))

    click.echo(f"Added: {format_entry(entry)}")


@main.command(name="list")
@click.option("--search", default="", help="Case-insensitive name search")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES), default=None, help="Only this category")
@click.option("--rating", type=click.Choice(RATING_CHOICES), default=None, help="Only this rating")
@click.option("--sort", "sort_key", type=click.Choice(SORT_CHOICES), default=SortKey.NAME.value, help="Sort field")
@click.option("--desc", is_flag=True, help="Sort in descending order")
@click.pass_context
def list_entries(ctx, search, category, rating, sort_key, desc):
    """List entries with optional search, filters and sorting."""
    store = _open(ctx)
    criteria = ViewCriteria(
        search_text=search,
        category=category,
        rating=rating,
        sort_key=sort_key,
        direction=SortDirection.DESC if desc else SortDirection.ASC,
    )
    print_entries(view(store.entries, criteria))


@main.command()
@click.argument("entry_id")
@click.option("--name", default=None, help="New name")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES), default=None, help="New category")
@click.option("--rating", type=click.Choice(RATING_CHOICES), default=None, help="New rating")
@click.option("--link", default=None, help="New link (empty string clears it)")
@click.option("--last-position", default=None, help="New last position (empty string clears it)")
@click.option("--view-date", type=click.DateTime(formats=DATE_FORMATS), default=None, help="New view date")
@click.pass_context
def edit(ctx, entry_id, name, category, rating, link, last_position, view_date):
    """Update fields of an existing entry."""
    store = _open(ctx)
    current = store.get(entry_id)
    if current is None:
        _fail(f"entry not found: {entry_id}")

    changes = {
        "name": name,
        "category": category,
        "rating": rating,
        "link": link,
        "last_position": last_position,
        "view_date": view_date.date() if view_date else None,
    }
    fields = current.model_dump()
    fields.update({k: v for k, v in changes.items() if v is not None})

    try:
        entry = store.update(fields)
    except EntryNotFoundError:
        _fail(f"entry not found: {entry_id}")
    except EntryValidationError as e:
        _fail(f"invalid entry: {e}")
    except CatalogError as e:
        _fail(str(e))

    click.echo(f"Updated: {format_entry(entry)}")


@main.command()
@click.argument("entry_id")
@click.pass_context
def remove(ctx, entry_id):
    """Remove an entry from the collection."""
    store = _open(ctx)
    try:
        removed = store.remove(entry_id)
    except CatalogError as e:
        _fail(str(e))

    if not removed:
        click.echo(f"Nothing to remove: no entry with id {entry_id}")
        return
    click.echo(f"Removed: {entry_id}")


@main.command()
@click.pass_context
def stats(ctx):
    """Show collection statistics."""
    store = _open(ctx)
    print_stats(summarize(store.entries))


@main.command()
@click.pass_context
def check(ctx):
    """Verify that the config loads and the saved collection parses."""
    from .healthcheck import run_checks

    healthy, messages = run_checks(ctx.obj.get("config_path"))
    for message in messages:
        click.echo(message, err=not healthy)
    sys.exit(0 if healthy else 1)


@main.command()
@click.option("--host", type=str, default=None, help="Web UI host (overrides config)")
@click.option("--port", type=int, default=None, help="Web UI port (overrides config)")
@click.pass_context
def web(ctx, host: Optional[str], port: Optional[int]):
    """Run the web UI."""
    import uvicorn
    from .web import app, set_store

    store = _open(ctx)
    settings = ctx.obj["settings"]
    host = host or settings.web_host
    port = port or settings.web_port
    set_store(store)

    logger.info("="*60)
    logger.info("Manga Catalog - Web UI Mode")
    logger.info("="*60)
    logger.info(f"Web UI: http://localhost:{port}")
    logger.info(f"Entries loaded: {len(store)}")
    logger.info("="*60)

    try:
        uvicorn.run(app, host=host, port=port, log_level="warning")
    except KeyboardInterrupt:
        logger.info("Web UI stopped by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
