"""Entry store: the in-memory collection and its persistence."""

import json
import logging
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from .constants import MAX_ID_ATTEMPTS, STORAGE_KEY, NoticeKind
from .errors import (
    EntryNotFoundError,
    EntryValidationError,
    IdentifierError,
    LoadParseError,
    StorageError,
)
from .models import Entry, EntryDraft, as_utc, utc_now
from .notifications import LogNotifier, Notifier
from .storage import Storage

logger = logging.getLogger(__name__)

_ENTRY_LIST = TypeAdapter(list[Entry])


def new_entry_id() -> str:
    """Default identifier factory."""
    return uuid.uuid4().hex


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class EntryStore:
    """Authoritative ordered collection of entries.

    Every mutating method validates first, then changes the in-memory list and
    writes the whole collection back to storage before returning. A failed
    write rolls the in-memory change back so memory and storage never diverge.
    """

    def __init__(
        self,
        storage: Storage,
        notifier: Optional[Notifier] = None,
        key: str = STORAGE_KEY,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize an empty store; call load() to read persisted entries."""
        self.storage = storage
        self.notifier = notifier or LogNotifier()
        self.key = key
        self.id_factory = id_factory or new_entry_id
        self.clock = clock or utc_now
        self.load_error: Optional[LoadParseError] = None
        self._entries: list[Entry] = []

    @property
    def entries(self) -> tuple[Entry, ...]:
        """Snapshot of the collection in insertion order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: str) -> Optional[Entry]:
        """Return the entry with this id, if any."""
        index = self._index_of(entry_id)
        return self._entries[index] if index is not None else None

    def load(self) -> list[Entry]:
        """Read the persisted collection, falling back to empty on any failure."""
        self.load_error = None
        try:
            raw = self.storage.read_raw(self.key)
            entries = self._parse(raw) if raw is not None else []
        except (StorageError, LoadParseError) as e:
            error = e if isinstance(e, LoadParseError) else LoadParseError(str(e))
            logger.error(f"Failed to load entries from '{self.key}': {error}")
            self.load_error = error
            self._entries = []
            self.notifier.notify(
                NoticeKind.ERROR,
                "Failed to load collection",
                "Your saved entries could not be loaded.",
            )
            return []

        self._entries = entries
        logger.info(f"Loaded {len(entries)} entries from '{self.key}'")
        return list(entries)

    def _parse(self, raw: str) -> list[Entry]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise LoadParseError(f"Stored document is not valid JSON: {e}") from e
        except RecursionError as e:
            raise LoadParseError("Stored document is nested too deeply") from e
        if not isinstance(data, list):
            raise LoadParseError(f"Stored document is a {type(data).__name__}, expected a list")
        try:
            entries = _ENTRY_LIST.validate_python(data)
        except ValidationError as e:
            raise LoadParseError(f"Stored document has invalid entries: {e.error_count()} errors") from e

        seen = set()
        for entry in entries:
            if entry.id in seen:
                raise LoadParseError(f"Stored document has duplicate id: {entry.id}")
            seen.add(entry.id)
        return entries

    def persist(self) -> None:
        """Write the entire collection to storage."""
        document = json.dumps(
            [entry.to_document() for entry in self._entries],
            ensure_ascii=False,
        )
        self.storage.write_raw(self.key, document)
        logger.debug(f"Persisted {len(self._entries)} entries to '{self.key}'")

    def add(self, draft: Union[EntryDraft, Mapping]) -> Entry:
        """Validate a draft, assign id and creation time, append and persist."""
        fields = self._draft_fields(draft)
        date_added = as_utc(self.clock())
        fields["id"] = self._fresh_id()
        fields["date_added"] = date_added
        if _is_blank(fields.get("view_date")):
            fields["view_date"] = date_added.date()
        entry = self._validate(fields)

        self._entries.append(entry)
        try:
            self.persist()
        except StorageError:
            self._entries.pop()
            raise

        logger.info(f"Added entry {entry.id}: {entry.name}")
        self.notifier.notify(NoticeKind.INFO, "Entry added", f"{entry.name} was added to your collection.")
        return entry

    def update(self, entry: Union[Entry, Mapping]) -> Entry:
        """Replace the record with the same id in place and persist.

        The stored creation timestamp always wins over the one supplied.
        """
        fields = self._draft_fields(entry)
        entry_id = fields.get("id")
        index = self._index_of(entry_id) if isinstance(entry_id, str) else None
        if index is None:
            logger.warning(f"Cannot update missing entry: {entry_id}")
            raise EntryNotFoundError(str(entry_id))

        previous = self._entries[index]
        fields["date_added"] = previous.date_added
        if _is_blank(fields.get("view_date")):
            fields["view_date"] = previous.date_added.date()
        updated = self._validate(fields)

        self._entries[index] = updated
        try:
            self.persist()
        except StorageError:
            self._entries[index] = previous
            raise

        logger.info(f"Updated entry {updated.id}: {updated.name}")
        self.notifier.notify(NoticeKind.INFO, "Entry updated", f"{updated.name} was updated.")
        return updated

    def remove(self, entry_id: str) -> bool:
        """Delete the entry with this id; returns False if it does not exist."""
        index = self._index_of(entry_id)
        if index is None:
            logger.warning(f"Cannot remove missing entry: {entry_id}")
            return False

        removed = self._entries.pop(index)
        try:
            self.persist()
        except StorageError:
            self._entries.insert(index, removed)
            raise

        logger.info(f"Removed entry {removed.id}: {removed.name}")
        self.notifier.notify(NoticeKind.INFO, "Entry removed", f"{removed.name} was removed from your collection.")
        return True

    def _index_of(self, entry_id: str) -> Optional[int]:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        return None

    def _fresh_id(self) -> str:
        existing = {entry.id for entry in self._entries}
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = str(self.id_factory())
            if candidate and candidate not in existing:
                return candidate
        raise IdentifierError(f"Could not generate a unique id after {MAX_ID_ATTEMPTS} attempts")

    @staticmethod
    def _draft_fields(source: Union[EntryDraft, Mapping]) -> dict:
        """Field values keyed by Python name, whatever the input shape."""
        if isinstance(source, EntryDraft):
            return source.model_dump()
        if isinstance(source, Mapping):
            fields = dict(source)
            for alias, name in (("lastPosition", "last_position"), ("viewDate", "view_date"), ("dateAdded", "date_added")):
                if alias in fields:
                    fields.setdefault(name, fields.pop(alias))
            return fields
        raise EntryValidationError([f"entry: expected a mapping, got {type(source).__name__}"])

    @staticmethod
    def _validate(fields: dict) -> Entry:
        try:
            return Entry.model_validate(fields)
        except ValidationError as e:
            logger.warning(f"Rejected entry: {e.error_count()} validation errors")
            raise EntryValidationError.from_pydantic(e) from e
