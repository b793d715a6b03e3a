"""
Shared fixtures for the test suite.

The upstream scoring API is replaced by an ``httpx.MockTransport`` that routes
each request to a canned response by resource (matches, detail, balls,
balls_fallback) and records every call, so tests can assert both the
resulting payload and which upstream calls were made. API tests reach the
FastAPI app through ``httpx.ASGITransport``.
"""
from __future__ import annotations

import copy
from typing import Any, AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shared.utils.http_client import UpstreamClient
from api.app import create_app
from api.dependencies import get_provider
from ingest.providers.grassroots import GrassrootsProvider
from tests.payloads import EARLIER_BALL, LAST_BALL, make_detail, make_matches

BASE_URL = "https://upstream.test/scores"


@pytest.fixture
def detail() -> dict[str, Any]:
    return make_detail()


@pytest.fixture
def matches() -> list[dict[str, Any]]:
    return make_matches()


# --------------------------------------------------------------------------- #
#  Fake upstream
# --------------------------------------------------------------------------- #

def route_name(request: httpx.Request) -> str:
    path = request.url.path.split("/scores/", 1)[-1]
    if path.endswith("/balls"):
        return "balls" if "jsconfig" in request.url.params else "balls_fallback"
    if path.startswith("grades/"):
        return "matches"
    return "detail"


class FakeUpstream:
    """Routes requests to canned bodies; a missing route answers 404 with an empty object."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.calls: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        name = route_name(request)
        if name not in self.routes:
            return httpx.Response(404, json={})
        body = self.routes[name]
        if isinstance(body, Exception):
            raise body
        if isinstance(body, httpx.Response):
            return body
        if isinstance(body, str):
            return httpx.Response(200, text=body)
        return httpx.Response(200, json=copy.deepcopy(body))

    def called(self, name: str) -> int:
        return sum(1 for request in self.calls if route_name(request) == name)


ProviderFactory = Callable[[dict[str, Any]], tuple[GrassrootsProvider, FakeUpstream]]


@pytest.fixture
def make_provider() -> ProviderFactory:
    """Build a GrassrootsProvider backed by a FakeUpstream. Call ``await provider.start()`` before use."""

    def _make(routes: dict[str, Any]) -> tuple[GrassrootsProvider, FakeUpstream]:
        fake = FakeUpstream(routes)
        client = UpstreamClient(BASE_URL, transport=httpx.MockTransport(fake))
        return GrassrootsProvider(client, feature_flag="eccn:true"), fake

    return _make


@pytest.fixture
def full_routes() -> dict[str, Any]:
    """Upstream where team T1's chosen match M1 has a scorecard and a ball feed."""
    return {
        "matches": {"matches": make_matches()},
        "detail": {"matches": [{"match": make_detail()}]},
        "balls": [{"balls": [EARLIER_BALL, LAST_BALL]}],
    }


# --------------------------------------------------------------------------- #
#  HTTP client: talks to the FastAPI app without a real server
# --------------------------------------------------------------------------- #

@pytest_asyncio.fixture
async def api_client(make_provider: ProviderFactory) -> AsyncIterator[Callable[[dict[str, Any]], Any]]:
    """
    Open an ``httpx.AsyncClient`` against the app with the provider dependency
    pointed at a FakeUpstream. Usage: ``client, fake = await api_client(routes)``.
    """
    app = create_app(use_lifespan=False)
    opened: list[tuple[AsyncClient, GrassrootsProvider]] = []

    async def _open(routes: dict[str, Any]) -> tuple[AsyncClient, FakeUpstream]:
        provider, fake = make_provider(routes)
        await provider.start()
        app.dependency_overrides[get_provider] = lambda: provider
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        client = AsyncClient(transport=transport, base_url="http://test")
        opened.append((client, provider))
        return client, fake

    yield _open

    for client, provider in opened:
        await client.aclose()
        await provider.close()
    app.dependency_overrides.clear()
