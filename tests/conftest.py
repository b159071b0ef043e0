"""Shared test fixtures and utilities."""

import asyncio

import httpx
import pytest

from interfetch import Fetch, FetchConfig, FetchTransport

BASE_URL = "https://api.test"


class Recorder:
    """Records requests seen by the mock transport and controls its replies."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.delay = 0.0
        self.status = 200
        self.text: str | None = None

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(
            self.status,
            json={
                "method": request.method,
                "path": request.url.path,
                "headers": dict(request.headers),
            },
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder():
    """Create a request recorder acting as the mock server."""
    return Recorder()


@pytest.fixture
def transport(recorder):
    """Create a transport backed by httpx.MockTransport."""
    return FetchTransport(httpx.AsyncClient(transport=httpx.MockTransport(recorder)))


@pytest.fixture
def client(transport):
    """Create a client with a base URL and the mock transport."""
    return Fetch(FetchConfig(base_url=BASE_URL), transport)
