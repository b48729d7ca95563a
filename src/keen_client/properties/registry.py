"""Global property registry – values merged into every outgoing event."""
from __future__ import annotations

import copy
import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable

from keen_client.errors import PropertyError
from keen_client.observability import LogEvent, get_logger
from keen_client.properties.dynamic import is_dynamic, resolve_dynamic
from keen_client.validation import validate_property_name

logger = get_logger(__name__)


class GlobalPropertyRegistry:
    """Append-only set of named global properties owned by one client.

    Writers take a lock and publish a new immutable snapshot; readers
    (``materialize``) work from whichever snapshot was current when they
    started, so they never observe a half-applied registration.
    """

    def __init__(self, validate_name: Callable[[Any], str] = validate_property_name) -> None:
        self._validate_name = validate_name
        self._lock = threading.Lock()
        self._entries: Mapping[str, Any] = MappingProxyType({})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def names(self) -> list[str]:
        return list(self._entries)

    def register(self, name: str, value: Any) -> None:
        """Add a static value or a dynamic provider under *name*.

        Raises:
            ConfigurationError: *name* is not a valid property name.
            PropertyError: *value* is ``None``, the provider fails its
                trial invocation, or *name* is already registered.
        """
        self._validate_name(name)
        if value is None:
            raise PropertyError("Global properties must have a non-null value.", property_name=name)
        if is_dynamic(value):
            # trial run only; the provider is re-invoked for every event
            resolve_dynamic(name, value)
            stored = value
        else:
            stored = copy.deepcopy(value)

        with self._lock:
            if name in self._entries:
                raise PropertyError(f'Global property "{name}" is already registered', property_name=name)
            entries = dict(self._entries)
            entries[name] = stored
            self._entries = MappingProxyType(entries)
        logger.debug(LogEvent.PROPERTY_REGISTERED, property=name, dynamic=is_dynamic(value))

    def materialize(self, base_payload: Mapping[str, Any]) -> dict[str, Any]:
        """Return a new dict of *base_payload* merged with every global property.

        *base_payload* is never modified, so a failure leaves nothing
        partially merged behind.

        Raises:
            PropertyError: a provider raised or returned ``None``, or the
                event already defines a property of the same name.
        """
        entries = self._entries
        merged = dict(base_payload)
        for name, value in entries.items():
            if name in merged:
                raise PropertyError(
                    f'Event property "{name}" collides with a global property',
                    property_name=name,
                )
            merged[name] = resolve_dynamic(name, value) if is_dynamic(value) else copy.deepcopy(value)
        return merged


__all__ = ["GlobalPropertyRegistry"]
