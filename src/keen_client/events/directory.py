"""DirectoryEventCache – one JSON file per queued event, survives restarts."""
from __future__ import annotations

import itertools
import json
import os
import threading
import uuid
from pathlib import Path

from keen_client.events.record import CachedEvent
from keen_client.observability import LogEvent, get_logger

logger = get_logger(__name__)

_SUFFIX = ".json"
_CORRUPT_SUFFIX = ".corrupt"


class DirectoryEventCache:
    """File-backed FIFO cache.

    File names start with a zero-padded sequence number, so lexical order
    is insertion order. The sequence resumes after the highest number
    already in the directory, which keeps order across restarts and is
    independent of the wall clock. Files are written to a temporary name
    and renamed into place; a file that cannot be parsed on take is
    renamed with a ``.corrupt`` suffix and skipped.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._counter = itertools.count(self._next_sequence())

    @property
    def directory(self) -> Path:
        return self._dir

    def add(self, event: CachedEvent) -> None:
        body = json.dumps({"destination": event.destination, "payload": event.as_dict()})
        with self._lock:
            stem = f"{next(self._counter):020d}-{uuid.uuid4().hex}"
            tmp = self._dir / f".{stem}.tmp"
            tmp.write_text(body, encoding="utf-8")
            os.replace(tmp, self._dir / f"{stem}{_SUFFIX}")

    def try_take(self) -> CachedEvent | None:
        with self._lock:
            for path in self._pending():
                try:
                    raw = path.read_text(encoding="utf-8")
                except FileNotFoundError:
                    continue
                try:
                    doc = json.loads(raw)
                    event = CachedEvent(doc["destination"], doc["payload"])
                except (ValueError, KeyError, TypeError) as exc:
                    logger.warning(LogEvent.CACHE_CORRUPT_ENTRY, path=str(path), error=repr(exc))
                    path.replace(path.with_suffix(_CORRUPT_SUFFIX))
                    continue
                path.unlink(missing_ok=True)
                return event
        return None

    def clear(self) -> None:
        with self._lock:
            for path in self._pending():
                path.unlink(missing_ok=True)

    def __len__(self) -> int:
        return len(self._pending())

    def _pending(self) -> list[Path]:
        return sorted(p for p in self._dir.glob(f"*{_SUFFIX}") if not p.name.startswith("."))

    def _next_sequence(self) -> int:
        highest = -1
        for path in self._dir.iterdir():
            head = path.name.lstrip(".").split("-", 1)[0]
            if head.isdigit():
                highest = max(highest, int(head))
        return highest + 1


__all__ = ["DirectoryEventCache"]
