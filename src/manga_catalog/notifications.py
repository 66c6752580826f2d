"""User-facing notices emitted by the entry store."""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from .constants import NOTICE_HISTORY_SIZE, NoticeKind

logger = logging.getLogger(__name__)


class Notice(BaseModel):
    """A single notice shown to the user."""

    kind: NoticeKind
    title: str
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier(Protocol):
    """Fire-and-forget notification sink."""

    def notify(self, kind: NoticeKind, title: str, message: str) -> None:
        ...


class LogNotifier:
    """Logs notices and keeps the most recent ones for display."""

    def __init__(self, history_size: int = NOTICE_HISTORY_SIZE):
        self.history: deque[Notice] = deque(maxlen=history_size)

    def notify(self, kind: NoticeKind, title: str, message: str) -> None:
        """Record a notice and log it at a level matching its kind."""
        notice = Notice(kind=kind, title=title, message=message)
        self.history.append(notice)
        if notice.kind == NoticeKind.ERROR:
            logger.error(f"{title}: {message}")
        else:
            logger.info(f"{title}: {message}")

    def recent(self, limit: Optional[int] = None) -> list[Notice]:
        """Return recent notices, newest first."""
        notices = list(reversed(self.history))
        return notices[:limit] if limit is not None else notices
