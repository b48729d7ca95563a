"""CachedEvent – one queued, fully materialised event."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from keen_client.events.payload import freeze, thaw


class CachedEvent:
    """A destination URL plus an immutable payload, and at most one error.

    The payload already carries every global property as of creation.
    ``error`` starts unset and is attached once, by the submission
    pipeline, after a failed delivery.
    """

    __slots__ = ("_destination", "_error", "_payload")

    def __init__(self, destination: str, payload: Mapping[str, Any]) -> None:
        self._destination = destination
        self._payload: Mapping[str, Any] = freeze(payload)
        self._error: Exception | None = None

    @property
    def destination(self) -> str:
        return self._destination

    @property
    def collection(self) -> str | None:
        """Collection segment of an ``.../events/<collection>`` destination."""
        _, sep, collection = self._destination.rpartition("/events/")
        return collection if sep else None

    @property
    def payload(self) -> Mapping[str, Any]:
        """Read-only view; nested lists are exposed as tuples."""
        return self._payload

    @property
    def error(self) -> Exception | None:
        return self._error

    def attach_error(self, error: Exception) -> None:
        if self._error is not None:
            raise RuntimeError(f"CachedEvent for {self._destination} already has an error attached")
        self._error = error

    def without_error(self) -> "CachedEvent":
        """The same destination and payload as a fresh record, ready to retry."""
        if self._error is None:
            return self
        return CachedEvent(self._destination, self._payload)

    def as_dict(self) -> dict[str, Any]:
        """Mutable copy of the payload, suitable for JSON encoding."""
        return thaw(self._payload)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CachedEvent):
            return NotImplemented
        return self._destination == other._destination and self.as_dict() == other.as_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"CachedEvent(destination={self._destination!r}, error={self._error!r})"


__all__ = ["CachedEvent"]
