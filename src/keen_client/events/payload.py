"""Conversion of caller event objects into JSON-ready payload documents."""
from __future__ import annotations

import dataclasses
import datetime as dt
import decimal
import enum
import json
import uuid
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from keen_client.errors import ValidationError


def _default(obj: Any) -> Any:  # noqa: PLR0911
    if isinstance(obj, (dt.datetime, dt.date, dt.time)):
        return obj.isoformat()
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if isinstance(obj, decimal.Decimal):
        return float(obj)
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, Mapping):
        return dict(obj)
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if hasattr(obj, "__dict__"):
        return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_payload(event: Any) -> dict[str, Any]:
    """Return a fresh JSON-object ``dict`` detached from *event*.

    Accepts mappings, dataclasses, pydantic models and plain objects.

    Raises:
        ValidationError: *event* is ``None``, cannot be serialised, or
            does not serialise to a JSON object.
    """
    if event is None:
        raise ValidationError("Event data is required.")
    try:
        payload = json.loads(json.dumps(event, default=_default, allow_nan=False))
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Event data could not be serialised: {exc}", cause=exc) from exc
    if not isinstance(payload, dict):
        raise ValidationError(
            f"Event data must serialise to a JSON object, got {type(payload).__name__}"
        )
    return payload


def freeze(value: Any) -> Any:
    """Recursively convert dicts to read-only mappings and lists to tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of :func:`freeze`: a fresh, mutable, JSON-serialisable copy."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


__all__ = ["freeze", "thaw", "to_payload"]
