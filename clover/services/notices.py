"""
clover.services.notices — User-Facing Notices
==============================================

Every session operation ends with a short message for the person at the
keyboard ("Login Successful", "Email is already in use.").  A
:class:`Notice` carries that message; a :class:`NoticeBuffer` keeps the
most recent ones in a thread-safe ring buffer so a UI can poll and show
them.

No persistence: notices are lost on restart.  The API builds one buffer
per app and hands it to its
:class:`~clover.services.auth_service.AuthService` (no module-level
singleton).
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Literal

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 200

Variant = Literal["default", "destructive"]


@dataclass(frozen=True, slots=True)
class Notice:
    """One user-facing message.  ``destructive`` marks a failure."""

    title: str
    description: str
    variant: Variant = "default"
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"

    def to_dict(self) -> dict[str, str]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


def log_notice(notice: Notice) -> None:
    """Mirror *notice* into the log: failures at WARNING, the rest at INFO."""
    level = logging.WARNING if notice.is_error else logging.INFO
    logger.log(level, "%s: %s", notice.title, notice.description)


class NoticeBuffer:
    """Thread-safe ring buffer backed by :class:`collections.deque`.

    Instances are callable, so a buffer can be passed straight in as an
    ``AuthService`` notice sink.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._entries: deque[Notice] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def __call__(self, notice: Notice) -> None:
        self.append(notice)

    def append(self, notice: Notice) -> None:
        log_notice(notice)
        with self._lock:
            self._entries.append(notice)

    def recent(self, limit: int = 20) -> list[Notice]:
        """Return up to *limit* notices, newest last."""
        with self._lock:
            snapshot = list(self._entries)
        if limit and len(snapshot) > limit:
            snapshot = snapshot[-limit:]
        return snapshot

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)
