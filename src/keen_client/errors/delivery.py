"""Delivery errors: single-record failures and the drain aggregate."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from keen_client.errors.base import KeenError

if TYPE_CHECKING:
    from keen_client.events.record import CachedEvent


class DeliveryError(KeenError):
    """The service rejected a request, or the request never completed.

    ``error_code`` is set when the response body carried a service-level
    error; ``status_code`` is set when a response was received at all.
    """

    default_code = "delivery_error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.error_code = error_code

    @classmethod
    def from_api_error(
        cls,
        error_code: str,
        message: str,
        *,
        status_code: int | None = None,
        collection: str | None = None,
    ) -> "DeliveryError":
        return cls(
            f"{error_code} : {message}",
            error_code=error_code,
            status_code=status_code,
            collection=collection,
        )

    @classmethod
    def from_status(cls, operation: str, status_code: int, *, collection: str | None = None) -> "DeliveryError":
        return cls(f"{operation} failed with status: {status_code}", status_code=status_code, collection=collection)

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        if self.status_code is not None:
            base["status_code"] = self.status_code
        if self.error_code is not None:
            base["error_code"] = self.error_code
        return base


class TransportError(DeliveryError):
    """The transport could not complete the request (timeout, connection, bad body)."""

    default_code = "transport_error"


class CacheSubmissionError(KeenError):
    """One or more cached events could not be submitted.

    ``failed_events`` lists exactly the records that failed, in drain
    order, each carrying its own ``error``.
    """

    default_code = "cache_submission_error"

    def __init__(
        self,
        failed_events: list["CachedEvent"],
        message: str = "One or more cached events could not be submitted",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.failed_events: list[CachedEvent] = list(failed_events)

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["failed_events"] = [
            {
                "destination": e.destination,
                "error": e.error.to_dict() if isinstance(e.error, KeenError) else repr(e.error),
            }
            for e in self.failed_events
        ]
        return base


__all__ = ["CacheSubmissionError", "DeliveryError", "TransportError"]
