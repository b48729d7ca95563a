"""Cached events and the caches that queue them."""
from keen_client.events.cache import EventCache, InMemoryEventCache
from keen_client.events.directory import DirectoryEventCache
from keen_client.events.payload import to_payload
from keen_client.events.record import CachedEvent

__all__ = ["CachedEvent", "DirectoryEventCache", "EventCache", "InMemoryEventCache", "to_payload"]
