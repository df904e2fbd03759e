"""Transport – HttpResponse, Transport port and the httpx implementation."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, runtime_checkable

import httpx

__all__ = ["HttpResponse", "HttpxTransport", "Transport"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status, headers and raw body of a completed HTTP exchange."""

    status_code: int
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class Transport(Protocol):
    """Port: perform one HTTP request and return the raw response.

    Network failures and timeouts are raised by the implementation and are
    not translated by callers.
    """

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        content: bytes | None = None,
    ) -> HttpResponse: ...


class HttpxTransport:
    """Thin synchronous httpx wrapper.

    Non-2xx responses are returned, not raised. ``httpx.TransportError``
    (including timeouts) propagates unchanged.
    """

    def __init__(self, timeout: float = 10.0, client: httpx.Client | None = None, **kwargs: Any) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, **kwargs)

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        content: bytes | None = None,
    ) -> HttpResponse:
        logger.debug("http request method=%s host=%s", method, httpx.URL(url).host)
        response = self._client.request(method, url, headers=dict(headers), content=content)
        return HttpResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )
