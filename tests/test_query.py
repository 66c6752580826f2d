"""Tests for listing search, filters and sorting."""

from datetime import date

import pytest
from pydantic import ValidationError

from manga_catalog.models import Category, Rating
from manga_catalog.query import SortDirection, SortKey, ViewCriteria, view


def names(entries):
    return [e.name for e in entries]


def test_search_is_case_insensitive_substring(make_entry):
    entries = [make_entry("OnePiece"), make_entry("Naruto")]

    assert names(view(entries, ViewCriteria(search_text="one"))) == ["OnePiece"]
    assert names(view(entries, ViewCriteria(search_text="RUT"))) == ["Naruto"]


def test_empty_criteria_returns_all_sorted_by_name(make_entry):
    entries = [make_entry("banana"), make_entry("Apple"), make_entry("cherry")]

    assert names(view(entries)) == ["Apple", "banana", "cherry"]


def test_name_sort_is_stable_on_ties(make_entry):
    first = make_entry("same")
    second = make_entry("Same")
    third = make_entry("SAME")

    result = view([first, second, third])
    assert [e.id for e in result] == [first.id, second.id, third.id]


def test_rating_sort_uses_canonical_order(make_entry):
    # alphabetical input order differs from the canonical scale
    alphabetical = sorted(Rating, key=lambda r: r.value)
    entries = [make_entry(f"title {r.value}", rating=r) for r in alphabetical]

    result = view(entries, ViewCriteria(sort_key=SortKey.RATING))

    assert [e.rating.value for e in result] == [
        "EX", "+S", "S", "-S", "+A", "A", "-A", "+B", "B", "C", "D", "E", "F", "DeixarPraMaisTarde",
    ]


def test_rating_b_sorts_before_c(make_entry):
    entries = [make_entry("x", rating="C"), make_entry("y", rating="B")]

    result = view(entries, ViewCriteria(sort_key="rating"))
    assert [e.rating for e in result] == [Rating.B, Rating.C]


def test_descending_is_exact_mirror_of_ascending(make_entry):
    entries = [
        make_entry("a", rating="A"),
        make_entry("b", rating="S"),
        make_entry("c", rating="A"),
        make_entry("d", rating="F"),
    ]

    ascending = view(entries, ViewCriteria(sort_key=SortKey.RATING))
    descending = view(entries, ViewCriteria(sort_key=SortKey.RATING, direction=SortDirection.DESC))

    assert names(ascending) == ["b", "a", "c", "d"]
    assert descending == list(reversed(ascending))


def test_category_sort_uses_text_value(make_entry):
    entries = [make_entry("x", category="outro"), make_entry("y", category="manhwa"), make_entry("z", category="manga")]

    result = view(entries, ViewCriteria(sort_key=SortKey.CATEGORY))
    assert [e.category for e in result] == [Category.MANGA, Category.MANHWA, Category.OTHER]


def test_view_date_sort_falls_back_to_date_added(make_entry):
    old_view = make_entry("old view", days_ago=0, view_date=date(2025, 1, 1))
    no_view = make_entry("added 10 days ago", days_ago=10)
    recent_view = make_entry("recent view", days_ago=100, view_date=date(2026, 10, 18))

    result = view([recent_view, no_view, old_view], ViewCriteria(sort_key=SortKey.VIEW_DATE))
    assert names(result) == ["old view", "added 10 days ago", "recent view"]


def test_filters_are_conjunctive(make_entry):
    entries = [
        make_entry("Solo Leveling", category="manhwa", rating="S"),
        make_entry("Solo Camping", category="manga", rating="S"),
        make_entry("Solo Max", category="manhwa", rating="B"),
        make_entry("Omniscient Reader", category="manhwa", rating="S"),
    ]

    criteria = ViewCriteria(search_text="solo", category="manhwa", rating="S")
    assert names(view(entries, criteria)) == ["Solo Leveling"]


def test_empty_filters_match_everything(make_entry):
    entries = [make_entry("a", category="outro"), make_entry("b", rating="EX")]

    criteria = ViewCriteria(search_text="", category="", rating="")
    assert criteria.category is None
    assert criteria.rating is None
    assert len(view(entries, criteria)) == 2


def test_category_filter_is_normalized():
    assert ViewCriteria(category=" Manga").category == Category.MANGA


def test_unknown_filter_values_rejected():
    with pytest.raises(ValidationError):
        ViewCriteria(rating="Z")
    with pytest.raises(ValidationError):
        ViewCriteria(sort_key="popularity")


def test_input_is_not_mutated(make_entry):
    entries = [make_entry("b"), make_entry("a")]
    original = list(entries)

    result = view(entries)

    assert entries == original
    assert result is not entries
    assert names(result) == ["a", "b"]
