"""Tests for collection statistics."""

from datetime import datetime, timedelta

from manga_catalog.models import Category, Rating
from manga_catalog.stats import summarize


def test_empty_collection(now):
    stats = summarize([], now)

    assert stats.total == 0
    assert stats.by_category == {}
    assert stats.by_rating == []
    assert stats.recent_count == 0


def test_example_scenario(make_entry, now):
    a = make_entry("A", category="manga", rating="A", days_ago=5)
    b = make_entry("B", category="manhwa", rating="B", days_ago=40)

    stats = summarize([a, b], now)

    assert stats.total == 2
    assert stats.recent_count == 1
    assert stats.by_category == {Category.MANGA: 1, Category.MANHWA: 1}
    assert stats.by_rating == [(Rating.A, 1), (Rating.B, 1)]


def test_by_rating_follows_canonical_order(make_entry, now):
    entries = [
        make_entry("1", rating="DeixarPraMaisTarde"),
        make_entry("2", rating="C"),
        make_entry("3", rating="B"),
        make_entry("4", rating="C"),
        make_entry("5", rating="+S"),
    ]

    stats = summarize(entries, now)
    assert stats.by_rating == [(Rating.S_PLUS, 1), (Rating.B, 1), (Rating.C, 2), (Rating.LATER, 1)]


def test_by_category_only_lists_present_categories(make_entry, now):
    stats = summarize([make_entry("x", category="outro"), make_entry("y", category="outro")], now)
    assert stats.by_category == {Category.OTHER: 2}


def test_recent_window_is_inclusive(make_entry, now):
    on_boundary = make_entry("edge", days_ago=30)
    just_outside = make_entry("old", days_ago=30)
    just_outside = just_outside.model_copy(update={"date_added": now - timedelta(days=30, seconds=1)})
    at_now = make_entry("now", days_ago=0)
    future = make_entry("future").model_copy(update={"date_added": now + timedelta(hours=1)})

    stats = summarize([on_boundary, just_outside, at_now, future], now)
    assert stats.recent_count == 2


def test_naive_now_is_treated_as_utc(make_entry, now):
    entry = make_entry("x", days_ago=1)
    naive_now = datetime(now.year, now.month, now.day, now.hour)

    assert summarize([entry], naive_now).recent_count == 1


def test_summarize_is_deterministic(make_entry, now):
    entries = [make_entry("x", rating="A", days_ago=3), make_entry("y", rating="E", days_ago=90)]

    assert summarize(entries, now) == summarize(entries, now)
