from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Iterable, List

from actions.models import LogEntry, utcnow


class ExecutionLog:
    """Append-only record of dispatch attempts, kept in append order."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._entries: List[LogEntry] = []
        self._lock = threading.Lock()
        self._clock = clock

    def append(self, action_id: str, success: bool, response: str) -> LogEntry:
        with self._lock:
            entry = LogEntry(
                timestamp=self._clock(),
                action_id=action_id,
                success=bool(success),
                response=response,
            )
            self._entries.append(entry)
        return entry

    def list(self) -> List[LogEntry]:
        with self._lock:
            return list(self._entries)

    def replace_all(self, entries: Iterable[LogEntry]) -> None:
        with self._lock:
            self._entries = list(entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
