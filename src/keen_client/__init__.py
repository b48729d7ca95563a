"""
keen_client – client for a multi-tenant event analytics service.

Import path convention::

    from keen_client import KeenClient, ProjectSettings
    from keen_client.events import InMemoryEventCache
    from keen_client.errors import CacheSubmissionError
"""

from keen_client.client import KeenClient
from keen_client.config import ProjectSettings
from keen_client.errors import (
    CacheSubmissionError,
    ConfigurationError,
    DeliveryError,
    KeenError,
    NotConfiguredError,
    PropertyError,
    ValidationError,
)
from keen_client.events import CachedEvent, DirectoryEventCache, EventCache, InMemoryEventCache

__version__ = "0.1.0"
__all__ = [
    "CacheSubmissionError",
    "CachedEvent",
    "ConfigurationError",
    "DeliveryError",
    "DirectoryEventCache",
    "EventCache",
    "InMemoryEventCache",
    "KeenClient",
    "KeenError",
    "NotConfiguredError",
    "ProjectSettings",
    "PropertyError",
    "ValidationError",
    "__version__",
]
