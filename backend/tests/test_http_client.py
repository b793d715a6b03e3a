"""Unit tests for the upstream client: JSON parsing, window.Dto extraction and error mapping."""
from __future__ import annotations

import httpx
import pytest

from shared.utils.http_client import (
    ParseError,
    UpstreamClient,
    UpstreamError,
    UpstreamUnavailable,
    parse_body,
)

HTML_PAGE = """<!doctype html>
<html><head><script>
  window.Config = {"cdn": "x"};
  window.Dto = {"matches": [{"id": "M1", "status": "LIVE"}]};
  window.Other = {"ignored": true};
</script></head><body></body></html>"""


# ── parse_body ──────────────────────────────────────────────────────────

class TestParseBody:

    def test_plain_json_object(self) -> None:
        assert parse_body('{"matches": []}') == {"matches": []}

    def test_plain_json_array(self) -> None:
        assert parse_body("[1, 2]") == [1, 2]

    def test_embedded_dto(self) -> None:
        assert parse_body(HTML_PAGE) == {"matches": [{"id": "M1", "status": "LIVE"}]}

    def test_embedded_dto_without_spaces(self) -> None:
        assert parse_body('<script>window.Dto={"a":1};</script>') == {"a": 1}

    def test_unparseable_raises(self) -> None:
        with pytest.raises(ParseError, match="window.Dto"):
            parse_body("<html>maintenance</html>")

    def test_broken_embedded_dto_raises(self) -> None:
        with pytest.raises(ParseError):
            parse_body("<script>window.Dto = {not json};</script>")

    def test_parse_error_is_upstream_error(self) -> None:
        assert issubclass(ParseError, UpstreamError)
        assert issubclass(UpstreamUnavailable, UpstreamError)


# ── UpstreamClient.fetch_json ───────────────────────────────────────────

def _client(handler) -> UpstreamClient:
    return UpstreamClient("https://upstream.test/scores", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_json_builds_url_and_params() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    client = _client(handler)
    await client.start()
    try:
        data = await client.fetch_json("grades/123/matches", params={"jsconfig": "eccn:true"})
    finally:
        await client.close()

    assert data == {"ok": True}
    assert len(seen) == 1
    assert seen[0].url.path == "/scores/grades/123/matches"
    assert seen[0].url.params["jsconfig"] == "eccn:true"


@pytest.mark.asyncio
async def test_fetch_json_reads_html_wrapper() -> None:
    client = _client(lambda request: httpx.Response(200, text=HTML_PAGE))
    await client.start()
    try:
        data = await client.fetch_json("matches/M1")
    finally:
        await client.close()
    assert data["matches"][0]["id"] == "M1"


@pytest.mark.asyncio
async def test_fetch_json_parses_error_status_bodies() -> None:
    client = _client(lambda request: httpx.Response(503, json={"matches": []}))
    await client.start()
    try:
        assert await client.fetch_json("grades/1/matches") == {"matches": []}
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_fetch_json_transport_error_maps_to_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    await client.start()
    try:
        with pytest.raises(UpstreamUnavailable, match="connection refused"):
            await client.fetch_json("grades/1/matches")
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_fetch_json_unparseable_body_raises_parse_error() -> None:
    client = _client(lambda request: httpx.Response(200, text="<html>nope</html>"))
    await client.start()
    try:
        with pytest.raises(ParseError):
            await client.fetch_json("grades/1/matches")
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_fetch_json_requires_start() -> None:
    client = _client(lambda request: httpx.Response(200, json={}))
    with pytest.raises(RuntimeError, match="not started"):
        await client.fetch_json("grades/1/matches")
