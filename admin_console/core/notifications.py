"""
User-facing notification surface.

Controllers call notify() fire-and-forget. NotificationCenter logs each
notification and keeps the most recent ones so the HTTP layer can hand them
to the frontend toast.
"""

import logging
import threading
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, List, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    kind: NotificationKind
    title: str
    description: str
    created_at: datetime


class Notifier(Protocol):
    def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        ...


class NotificationCenter:
    def __init__(self, max_size: int = 50):
        self._lock = threading.Lock()
        self._pending: Deque[Notification] = deque(maxlen=max_size)

    def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        level = logging.INFO if kind == NotificationKind.SUCCESS else logging.WARNING
        logger.log(level, "%s: %s", title, description)
        with self._lock:
            self._pending.append(Notification(
                kind=kind,
                title=title,
                description=description,
                created_at=datetime.now(timezone.utc),
            ))

    def drain(self) -> List[Notification]:
        """Return and clear pending notifications, oldest first."""
        with self._lock:
            items = list(self._pending)
            self._pending.clear()
            return items
