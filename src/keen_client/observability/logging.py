"""Observability – structlog setup for the ``keen_client`` logger tree.

Every record the client emits uses one of the :class:`LogEvent` names,
carries the project id once :func:`configure_logging` is given one, and
has API keys redacted. :class:`~keen_client.errors.KeenError` values are
rendered through their ``to_dict`` so log lines show the code and the
collection of a failure.
"""
from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from typing import IO, Any

import structlog

from keen_client.errors import KeenError

LOGGER_NAME = "keen_client"
REDACTED = "***REDACTED***"

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {"authorization", "master_key", "write_key", "read_key", "api_key", "credential"}
)


class LogEvent(enum.StrEnum):
    EVENT_CACHED = "keen.event.cached"
    EVENT_SENT = "keen.event.sent"
    DRAIN_STARTED = "keen.drain.started"
    DRAIN_RECORD_FAILED = "keen.drain.record_failed"
    DRAIN_CACHE_FAILED = "keen.drain.cache_failed"
    DRAIN_FINISHED = "keen.drain.finished"
    CACHE_CORRUPT_ENTRY = "keen.cache.corrupt_entry"
    COLLECTION_DELETED = "keen.collection.deleted"
    PROPERTY_REGISTERED = "keen.property.registered"
    HTTP_RESPONSE = "keen.http.response"


class SensitiveFieldsFilter:
    """Redact credential-bearing keys from a (possibly nested) event dict."""

    def __init__(self, fields: frozenset[str] | None = None) -> None:
        self._fields = frozenset(f.lower() for f in (fields or DEFAULT_SENSITIVE_FIELDS))

    def redact_deep(self, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {
                k: REDACTED if isinstance(k, str) and k.lower() in self._fields else self.redact_deep(v)
                for k, v in data.items()
            }
        if isinstance(data, list):
            return [self.redact_deep(v) for v in data]
        return data

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG002
        return self.redact_deep(event_dict)


def _stamp_project(project_id: str | None) -> Any:
    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG001
        if project_id is not None:
            event_dict.setdefault("project_id", project_id)
        return event_dict

    return processor


def _expand_keen_errors(
    logger: Any, method_name: str, event_dict: dict[str, Any]  # noqa: ARG001
) -> dict[str, Any]:
    for key, value in event_dict.items():
        if isinstance(value, KeenError):
            event_dict[key] = value.to_dict()
    return event_dict


def configure_logging(
    level: int = logging.INFO,
    *,
    project_id: str | None = None,
    sensitive_fields: frozenset[str] | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Send ``keen_client`` records to *stream* (stderr by default) as JSON.

    Only the ``keen_client`` logger is touched: its handler is replaced,
    it stops propagating, and its level is set. Calling again swaps the
    handler, so the project id or level can change at runtime. Returns
    the configured stdlib logger.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _stamp_project(project_id),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _expand_keen_errors,
        structlog.processors.format_exc_info,
        SensitiveFieldsFilter(sensitive_fields),
    ]
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    library_logger = logging.getLogger(LOGGER_NAME)
    for old in list(library_logger.handlers):
        if isinstance(old.formatter, structlog.stdlib.ProcessorFormatter):
            library_logger.removeHandler(old)
    library_logger.addHandler(handler)
    library_logger.setLevel(level)
    library_logger.propagate = False
    return library_logger


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger, bound to *initial_values* when given."""
    logger = structlog.get_logger(name or LOGGER_NAME)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "LOGGER_NAME",
    "REDACTED",
    "LogEvent",
    "SensitiveFieldsFilter",
    "configure_logging",
    "get_logger",
]
