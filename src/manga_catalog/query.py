"""Filtering and sorting of the entry collection for listing views."""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ValidationInfo, field_validator

from .models import Category, Entry, Rating

logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    """Fields a listing can be ordered by."""

    NAME = "name"
    RATING = "rating"
    CATEGORY = "category"
    VIEW_DATE = "viewDate"


class SortDirection(str, Enum):
    """Listing order."""

    ASC = "asc"
    DESC = "desc"


class ViewCriteria(BaseModel):
    """Search, filter and sort options for a listing."""

    search_text: str = ""
    category: Optional[Category] = None
    rating: Optional[Rating] = None
    sort_key: SortKey = SortKey.NAME
    direction: SortDirection = SortDirection.ASC

    @field_validator("search_text", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("category", "rating", mode="before")
    @classmethod
    def empty_means_any(cls, v, info: ValidationInfo):
        """An empty filter matches every entry."""
        if not isinstance(v, str) or isinstance(v, Enum):
            return v
        v = v.strip()
        if not v:
            return None
        return v.lower() if info.field_name == "category" else v


_SORT_KEYS: dict[SortKey, Callable[[Entry], Any]] = {
    SortKey.NAME: lambda entry: entry.name.casefold(),
    SortKey.RATING: lambda entry: entry.rating.rank,
    SortKey.CATEGORY: lambda entry: entry.category.value,
    SortKey.VIEW_DATE: lambda entry: entry.effective_view_date,
}


def matches(entry: Entry, criteria: ViewCriteria) -> bool:
    """Check an entry against all filters of the criteria."""
    if criteria.search_text and criteria.search_text.casefold() not in entry.name.casefold():
        return False
    if criteria.category is not None and entry.category != criteria.category:
        return False
    if criteria.rating is not None and entry.rating != criteria.rating:
        return False
    return True


def view(entries: Iterable[Entry], criteria: Optional[ViewCriteria] = None) -> list[Entry]:
    """Return the filtered and sorted entries as a new list.

    Sorting is stable. Descending order is the ascending result reversed, so
    the two directions always mirror each other exactly.
    """
    if criteria is None:
        criteria = ViewCriteria()

    selected = [entry for entry in entries if matches(entry, criteria)]
    result = sorted(selected, key=_SORT_KEYS[criteria.sort_key])
    if criteria.direction == SortDirection.DESC:
        result.reverse()

    logger.debug(
        f"View: {len(result)} entries (search='{criteria.search_text}', "
        f"sort={criteria.sort_key.value} {criteria.direction.value})"
    )
    return result
