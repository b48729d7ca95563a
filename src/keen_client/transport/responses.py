"""Service-level error inspection for decoded response bodies.

The service can reject a request inside a response body (``error_code``
and ``message`` members) independently of the HTTP status. The embedded
error is always checked first.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from keen_client.errors import DeliveryError
from keen_client.transport.base import TransportResponse


def extract_api_error(body: Any) -> tuple[str, str] | None:
    """Return ``(error_code, message)`` if *body* carries a service error."""
    if not isinstance(body, Mapping):
        return None
    code = body.get("error_code")
    if code is None:
        return None
    return str(code), str(body.get("message") or "")


def check_response(
    response: TransportResponse, operation: str, *, collection: str | None = None
) -> DeliveryError | None:
    """Classify *response*: ``None`` on success, otherwise the matching error."""
    api_error = extract_api_error(response.body)
    if api_error is not None:
        code, message = api_error
        return DeliveryError.from_api_error(
            code, message, status_code=response.status_code, collection=collection
        )
    if not response.is_success:
        return DeliveryError.from_status(operation, response.status_code, collection=collection)
    return None


def raise_for_response(response: TransportResponse, operation: str, *, collection: str | None = None) -> None:
    error = check_response(response, operation, collection=collection)
    if error is not None:
        raise error


__all__ = ["check_response", "extract_api_error", "raise_for_response"]
