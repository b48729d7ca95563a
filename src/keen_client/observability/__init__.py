"""Observability – structured logging."""
from keen_client.observability.logging import (
    DEFAULT_SENSITIVE_FIELDS,
    LOGGER_NAME,
    REDACTED,
    LogEvent,
    SensitiveFieldsFilter,
    configure_logging,
    get_logger,
)

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "LOGGER_NAME",
    "REDACTED",
    "LogEvent",
    "SensitiveFieldsFilter",
    "configure_logging",
    "get_logger",
]
