# src/transport/httpx_transport.py — v1
"""httpx-based transport.

Request bodies that are not already text or bytes are JSON-encoded.
Responses are returned with their text body; status >= 400 and network
failures become TransportError.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from halgraph.config.settings import Settings
from halgraph.core.errors import TransportError
from halgraph.core.models import JSON_MEDIA_TYPE, HttpRequest, HttpResponse
from halgraph.transport.base_transport import BaseTransport

logger = logging.getLogger(__name__)


def build_async_client(
    settings: Settings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the configured timeout and headers."""
    settings = settings or Settings()
    headers: dict[str, str] = {"User-Agent": settings.user_agent}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=settings.http_follow_redirects,
        headers=headers,
    )


class HttpxTransport(BaseTransport):
    """Transport backed by a shared `httpx.AsyncClient`."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._client = client or build_async_client(settings)

    async def request(self, request: HttpRequest) -> HttpResponse:
        method = request.method.upper()
        headers = dict(request.headers)
        kwargs: dict[str, Any] = {}
        if request.body is not None:
            if isinstance(request.body, (str, bytes)):
                kwargs["content"] = request.body
            else:
                kwargs["content"] = json.dumps(request.body)
                if not any(k.lower() == "content-type" for k in headers):
                    headers["Content-Type"] = JSON_MEDIA_TYPE

        logger.debug("%s %s", method, request.url)
        try:
            response = await self._client.request(
                method, request.url, headers=headers, **kwargs
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"{method} {request.url} failed: {e}", url=request.url
            ) from e

        if response.status_code >= 400:
            raise TransportError(
                f"{method} {request.url} returned HTTP {response.status_code}",
                status=response.status_code,
                url=request.url,
            )

        return HttpResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=response.text,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
