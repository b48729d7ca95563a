"""Transport – HttpxTransport."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from keen_client.errors import TransportError
from keen_client.observability import LogEvent, get_logger
from keen_client.transport.base import TransportResponse

logger = get_logger(__name__)


class HttpxTransport:
    """Async httpx transport with structured error mapping.

    A short-lived ``AsyncClient`` is opened per request, so one transport
    can serve coroutines running on different event loops (the blocking
    client API runs each call on its own loop).
    """

    def __init__(self, timeout: float = 10.0, **client_kwargs: Any) -> None:
        self._timeout = timeout
        self._client_kwargs = client_kwargs

    async def post(self, url: str, payload: Mapping[str, Any], credential: str) -> TransportResponse:
        return await self._request("POST", url, credential, json=dict(payload))

    async def get(
        self, url: str, credential: str, params: Mapping[str, Any] | None = None
    ) -> TransportResponse:
        return await self._request("GET", url, credential, params=dict(params or {}))

    async def delete(self, url: str, credential: str) -> TransportResponse:
        return await self._request("DELETE", url, credential)

    async def _request(self, method: str, url: str, credential: str, **kwargs: Any) -> TransportResponse:
        headers = {"Authorization": credential, "Accept": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, **self._client_kwargs) as client:
                response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            raise TransportError(f"HTTP request timed out: {method} {url}", cause=exc) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"HTTP request failed: {method} {url}: {exc}", cause=exc) from exc

        logger.debug(LogEvent.HTTP_RESPONSE, method=method, url=url, status=response.status_code)
        return TransportResponse(response.status_code, self._decode(method, url, response))

    @staticmethod
    def _decode(method: str, url: str, response: httpx.Response) -> Any:
        if not response.content.strip():
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"Malformed JSON response from {method} {url}",
                status_code=response.status_code,
                cause=exc,
            ) from exc


__all__ = ["HttpxTransport"]
