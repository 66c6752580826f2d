"""Shared fixtures."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from manga_catalog.models import Entry
from manga_catalog.notifications import LogNotifier
from manga_catalog.storage import MemoryStorage
from manga_catalog.store import EntryStore


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def now():
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now):
    return FixedClock(now)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def notifier():
    return LogNotifier()


@pytest.fixture
def store(storage, notifier, clock):
    counter = itertools.count(1)
    return EntryStore(storage, notifier=notifier, id_factory=lambda: f"id-{next(counter)}", clock=clock)


@pytest.fixture
def make_entry(now):
    """Factory for stored entries added a given number of days before now."""
    counter = itertools.count(1)

    def _make(name, rating="B", category="manga", days_ago=0, view_date=None, **extra):
        return Entry(
            id=f"e{next(counter)}",
            name=name,
            rating=rating,
            category=category,
            date_added=now - timedelta(days=days_ago),
            view_date=view_date,
            **extra,
        )

    return _make
