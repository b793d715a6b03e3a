"""
Async HTTP client for the upstream scoring API.

Some upstream routes answer with a JSON document, others (depending on
routing and edge caching) with a full HTML page that embeds the same payload
as ``window.Dto = {...};``. ``fetch_json`` accepts both.
"""
from __future__ import annotations

import json
import re
import time
from typing import Any, Optional

import httpx

from shared.utils.logging import get_logger
from shared.utils.metrics import UPSTREAM_LATENCY, UPSTREAM_REQUESTS

logger = get_logger(__name__)

_EMBEDDED_DTO = re.compile(r"window\.Dto\s*=\s*({[\s\S]*?});")


class UpstreamError(Exception):
    """Base class for failures talking to the upstream scoring API."""


class UpstreamUnavailable(UpstreamError):
    """Raised when the request could not be completed at the transport level."""


class ParseError(UpstreamError):
    """Raised when a response body is neither JSON nor a page embedding window.Dto."""


def parse_body(text: str) -> Any:
    """Parse a response body as JSON, falling back to the embedded window.Dto object."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    match = _EMBEDDED_DTO.search(text)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError as exc:
            raise ParseError(f"Embedded window.Dto is not valid JSON: {exc}") from exc
    raise ParseError("Could not parse response as JSON or extract window.Dto")


class UpstreamClient:
    """
    Thin async wrapper around httpx for the scoring API.
    One GET per call, no retries, no caching.
    """

    def __init__(
        self,
        base_url: str,
        timeout_s: Optional[float] = None,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_s
        self._default_headers = headers or {}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def start(self) -> None:
        """Initialize the underlying httpx client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._default_headers,
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        resource: str = "unknown",
    ) -> Any:
        """
        GET ``path`` and return the parsed payload.

        The body is read once and parsed regardless of the status code; the
        upstream sometimes returns usable payloads on non-2xx responses.

        Raises:
            UpstreamUnavailable: On connection errors, timeouts and other transport failures.
            ParseError: If the body cannot be parsed.
        """
        if not self._client:
            raise RuntimeError("UpstreamClient not started. Call start() first.")

        start_time = time.perf_counter()
        status = "error"
        try:
            resp = await self._client.get(path, params=params)
            status = str(resp.status_code)
            text = resp.text
        except httpx.HTTPError as exc:
            logger.warning("upstream_unavailable", resource=resource, path=path, error=str(exc))
            raise UpstreamUnavailable(str(exc) or exc.__class__.__name__) from exc
        finally:
            UPSTREAM_REQUESTS.labels(resource=resource, status=status).inc()
            UPSTREAM_LATENCY.labels(resource=resource).observe(time.perf_counter() - start_time)

        if resp.status_code >= 400:
            logger.warning("upstream_error_status", resource=resource, path=path, status=resp.status_code)

        logger.debug(
            "upstream_fetch",
            resource=resource,
            url=str(resp.url),
            status=resp.status_code,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return parse_body(text)
