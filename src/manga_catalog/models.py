"""Data models for catalog entries."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    """Medium/origin of a work."""

    MANGA = "manga"
    MANHWA = "manhwa"
    OTHER = "outro"


class Rating(str, Enum):
    """Personal grade, declared from best to worst."""

    EX = "EX"
    S_PLUS = "+S"
    S = "S"
    S_MINUS = "-S"
    A_PLUS = "+A"
    A = "A"
    A_MINUS = "-A"
    B_PLUS = "+B"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    LATER = "DeixarPraMaisTarde"

    @property
    def rank(self) -> int:
        """Position in the canonical rating order (0 is best)."""
        return RATING_ORDER[self]


# Canonical order used for every rating comparison; never alphabetic
RATING_ORDER: dict[Rating, int] = {rating: index for index, rating in enumerate(Rating)}


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class EntryDraft(BaseModel):
    """Entry fields supplied by the user before the store assigns identity."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    category: Category = Category.MANGA
    rating: Rating = Rating.B
    link: Optional[str] = None
    last_position: Optional[str] = Field(None, alias="lastPosition")
    view_date: Optional[date] = Field(None, alias="viewDate")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        """Names are trimmed and must not be empty."""
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        """Accept category text regardless of case or surrounding spaces."""
        if isinstance(v, str) and not isinstance(v, Category):
            return v.strip().lower()
        return v

    @field_validator("rating", mode="before")
    @classmethod
    def normalize_rating(cls, v):
        """Ratings are case-sensitive; only surrounding spaces are dropped."""
        if isinstance(v, str) and not isinstance(v, Rating):
            return v.strip()
        return v

    @field_validator("link", "last_position", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat blank optional text as absent."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("view_date", mode="before")
    @classmethod
    def blank_date_to_none(cls, v):
        """Treat an empty date string as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Entry(EntryDraft):
    """A catalog entry as stored and persisted."""

    id: str = Field(min_length=1)
    category: Category
    rating: Rating
    date_added: datetime = Field(alias="dateAdded")

    @field_validator("date_added")
    @classmethod
    def date_added_utc(cls, v: datetime) -> datetime:
        """Store creation timestamps as aware UTC."""
        return as_utc(v)

    @property
    def effective_view_date(self) -> datetime:
        """Instant used when ordering by view date."""
        if self.view_date is not None:
            return datetime.combine(self.view_date, datetime.min.time(), tzinfo=timezone.utc)
        return self.date_added

    def to_document(self) -> dict:
        """Serialize with the persisted field names."""
        return self.model_dump(mode="json", by_alias=True)


class CatalogStats(BaseModel):
    """Summary statistics of a collection."""

    total: int = 0
    by_category: dict[Category, int] = Field(default_factory=dict)
    by_rating: list[tuple[Rating, int]] = Field(default_factory=list)
    recent_count: int = 0
