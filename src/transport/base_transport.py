# src/transport/base_transport.py — v1
"""Abstract HTTP transport used by the sync engines."""

from __future__ import annotations

from abc import ABC, abstractmethod

from halgraph.core.models import HttpRequest, HttpResponse


class BaseTransport(ABC):
    """Performs one request and returns status, headers and body.

    Implementations raise TransportError on network failure and on HTTP
    error statuses (>= 400). Successful responses are returned as-is; the
    engines decide what to merge.
    """

    @abstractmethod
    async def request(self, request: HttpRequest) -> HttpResponse:
        """Send `request` and return the response."""

    async def aclose(self) -> None:
        """Release connections."""
