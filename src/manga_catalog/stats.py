"""Summary statistics over the entry collection."""

from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Optional

from .constants import RECENT_WINDOW_DAYS
from .models import CatalogStats, Entry, as_utc, utc_now


def summarize(entries: Iterable[Entry], now: Optional[datetime] = None) -> CatalogStats:
    """Compute totals, per-category and per-rating counts, and recent additions.

    Ratings come out in canonical order; an entry counts as recent when it was
    added within the last RECENT_WINDOW_DAYS days, both ends inclusive.
    """
    now = as_utc(now) if now is not None else utc_now()
    window_start = now - timedelta(days=RECENT_WINDOW_DAYS)

    entries = list(entries)
    by_category: dict = {}
    ratings: Counter = Counter()
    recent = 0

    for entry in entries:
        by_category[entry.category] = by_category.get(entry.category, 0) + 1
        ratings[entry.rating] += 1
        if window_start <= entry.date_added <= now:
            recent += 1

    return CatalogStats(
        total=len(entries),
        by_category=by_category,
        by_rating=sorted(ratings.items(), key=lambda item: item[0].rank),
        recent_count=recent,
    )
