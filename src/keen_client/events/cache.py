"""Event cache port and the in-memory FIFO implementation."""
from __future__ import annotations

import threading
from collections import deque
from typing import Protocol, runtime_checkable

from keen_client.events.record import CachedEvent


@runtime_checkable
class EventCache(Protocol):
    """Port: queue of events awaiting submission.

    ``add`` must be safe for concurrent producers. ``try_take`` returns the
    next record, or ``None`` when the cache is empty, without blocking.
    A taken record is never handed out again.
    """

    def add(self, event: CachedEvent) -> None: ...
    def try_take(self) -> CachedEvent | None: ...


class InMemoryEventCache:
    """Thread-safe FIFO cache held in process memory."""

    def __init__(self) -> None:
        self._events: deque[CachedEvent] = deque()
        self._lock = threading.Lock()

    def add(self, event: CachedEvent) -> None:
        with self._lock:
            self._events.append(event)

    def try_take(self) -> CachedEvent | None:
        with self._lock:
            return self._events.popleft() if self._events else None

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


__all__ = ["EventCache", "InMemoryEventCache"]
