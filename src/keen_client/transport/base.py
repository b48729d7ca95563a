"""Transport port and the response value it returns."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@dataclasses.dataclass(frozen=True)
class TransportResponse:
    """HTTP status plus the decoded JSON body (``{}`` when the body is empty)."""

    status_code: int
    body: Any = dataclasses.field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class Transport(Protocol):
    """Port: authenticated JSON requests against the analytics service.

    Network and decoding failures are raised; delivered-but-rejected
    requests come back as a normal :class:`TransportResponse`.
    """

    async def post(self, url: str, payload: Mapping[str, Any], credential: str) -> TransportResponse: ...
    async def get(
        self, url: str, credential: str, params: Mapping[str, Any] | None = None
    ) -> TransportResponse: ...
    async def delete(self, url: str, credential: str) -> TransportResponse: ...


__all__ = ["Transport", "TransportResponse"]
