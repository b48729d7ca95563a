"""Error hierarchy and public re-exports.

Hierarchy::

    KeenError
    ├── ConfigurationError       (client.py)
    │   ├── NotConfiguredError
    │   └── ValidationError
    ├── PropertyError            (client.py)
    ├── DeliveryError            (delivery.py)
    │   └── TransportError
    └── CacheSubmissionError     (delivery.py)
"""

from keen_client.errors.base import KeenError
from keen_client.errors.client import (
    ConfigurationError,
    NotConfiguredError,
    PropertyError,
    ValidationError,
)
from keen_client.errors.delivery import CacheSubmissionError, DeliveryError, TransportError

__all__ = [
    "CacheSubmissionError",
    "ConfigurationError",
    "DeliveryError",
    "KeenError",
    "NotConfiguredError",
    "PropertyError",
    "TransportError",
    "ValidationError",
]
