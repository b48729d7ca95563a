"""Testing – in-memory doubles for the client's ports."""
from keen_client.events import InMemoryEventCache
from keen_client.testing.fakes import FakeTransport, RecordedCall

__all__ = ["FakeTransport", "InMemoryEventCache", "RecordedCall"]
