"""Exception types raised by the catalog core."""

from typing import Optional

from pydantic import ValidationError


class CatalogError(Exception):
    """Base class for recoverable catalog errors."""


class StorageError(CatalogError):
    """Reading from or writing to storage failed."""


class LoadParseError(CatalogError):
    """The stored document exists but is not a valid entry list."""


class EntryNotFoundError(CatalogError):
    """No entry matches the given id."""

    def __init__(self, entry_id: str):
        super().__init__(f"Entry not found: {entry_id}")
        self.entry_id = entry_id


class EntryValidationError(CatalogError):
    """Entry fields failed validation; nothing was changed."""

    def __init__(self, messages: list[str], cause: Optional[ValidationError] = None):
        super().__init__("; ".join(messages))
        self.messages = messages
        self.cause = cause

    @classmethod
    def from_pydantic(cls, error: ValidationError) -> "EntryValidationError":
        """Build from a pydantic error, one message per failing field."""
        messages = []
        for detail in error.errors():
            field = ".".join(str(part) for part in detail.get("loc", ())) or "entry"
            messages.append(f"{field}: {detail.get('msg', 'invalid value')}")
        return cls(messages, cause=error)


class IdentifierError(CatalogError):
    """The identifier factory kept returning ids already in use."""
