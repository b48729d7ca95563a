"""Transport – HTTP access to the analytics service."""
from keen_client.transport.base import Transport, TransportResponse
from keen_client.transport.http import HttpxTransport
from keen_client.transport.responses import check_response, extract_api_error, raise_for_response

__all__ = [
    "HttpxTransport",
    "Transport",
    "TransportResponse",
    "check_response",
    "extract_api_error",
    "raise_for_response",
]
