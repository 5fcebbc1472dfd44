"""
HTTP Client.

Thin wrapper around httpx.AsyncClient used by the session for every
request. Adds the user agent, TLS settings and timeouts from
application.yaml, logs requests and responses (source "http") and converts
transport failures into ClientError.

Usage:
    client = HttpClient(verify=True)
    response = await client.request("GET", "https://compute.example.com/v2.1/servers")
    await client.close()
"""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

import httpx

from ostack.core.config import get_app_config, get_http_timeouts
from ostack.core.exceptions import ClientError
from ostack.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


@dataclass
class RequestTiming:
    method: str
    url: str
    status_code: int | None
    elapsed: float


class HttpClient:
    """
    Async HTTP client with lazy connection setup.

    Args:
        verify: True/False, or a CA bundle path
        transport: Optional httpx transport (tests inject httpx.MockTransport)
        timeout: Override (connect, read) timeouts from application.yaml
    """

    def __init__(
        self,
        verify: bool | str = True,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: tuple[float, float] | None = None,
    ) -> None:
        self.verify = verify
        self.transport = transport
        self.timeout = timeout or get_http_timeouts()
        self.user_agent = get_app_config().application.http.user_agent
        self.timings: list[RequestTiming] = []
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            connect, read = self.timeout
            self._client = httpx.AsyncClient(
                verify=self.verify,
                transport=self.transport,
                timeout=httpx.Timeout(read, connect=connect),
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def _record(self, method: str, url: str, status_code: int | None, started: float) -> None:
        parts = urlsplit(url)
        self.timings.append(
            RequestTiming(method, f"{parts.scheme}://{parts.netloc}{parts.path}", status_code, time.monotonic() - started)
        )

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request.

        Raises:
            ClientError: On transport failure
        """
        client = self._get_client()
        log_with_source(
            logger, "http", "debug", "HTTP request",
            method=method, url=url, headers=kwargs.get("headers"),
        )
        started = time.monotonic()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            self._record(method, url, None, started)
            log_with_source(
                logger, "http", "error", "HTTP request failed",
                method=method, url=url, error=str(e),
            )
            raise ClientError(str(e) or type(e).__name__) from e

        self._record(method, url, response.status_code, started)
        log_with_source(
            logger, "http", "debug", "HTTP response",
            method=method, url=url, status_code=response.status_code,
            request_id=response.headers.get("X-Openstack-Request-Id"),
        )
        return response

    @asynccontextmanager
    async def stream(self, method: str, url: str, **kwargs: Any) -> AsyncIterator[httpx.Response]:
        """Send a request and stream the response body."""
        client = self._get_client()
        log_with_source(logger, "http", "debug", "HTTP stream request", method=method, url=url)
        started = time.monotonic()
        try:
            async with client.stream(method, url, **kwargs) as response:
                self._record(method, url, response.status_code, started)
                yield response
        except httpx.HTTPError as e:
            log_with_source(
                logger, "http", "error", "HTTP stream failed",
                method=method, url=url, error=str(e),
            )
            raise ClientError(str(e) or type(e).__name__) from e

    def timing_summary(self) -> list[tuple[str, str, int, float]]:
        """Per (method, url) request count and total seconds."""
        totals: dict[tuple[str, str], list[float]] = {}
        for timing in self.timings:
            totals.setdefault((timing.method, timing.url), []).append(timing.elapsed)
        return [(m, u, len(v), sum(v)) for (m, u), v in totals.items()]
