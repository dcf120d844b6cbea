"""
Pytest configuration and shared fixtures.
"""
import asyncio
from pathlib import Path

import httpx
import pytest

TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture
def testdata():
    """Read a captured fixture from tests/testdata as bytes."""
    def read(name: str) -> bytes:
        return (TESTDATA / name).read_bytes()
    return read


@pytest.fixture
def mock_http():
    """
    Build an httpx.AsyncClient whose transport is a MockTransport.

    The returned factory takes a handler (request -> response) and records
    every request it sees in `requests`, so tests can assert on the URL that
    actually went out.
    """
    requests = []

    def factory(handler):
        def record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)
        return httpx.AsyncClient(transport=httpx.MockTransport(record))

    factory.requests = requests
    return factory


class TrackedStream(httpx.AsyncByteStream):
    """
    Response body that remembers whether it was read to the end and closed.
    `stall` makes it hang after the first chunk so a caller can cancel mid-read.
    """

    def __init__(self, chunks, stall: bool = False) -> None:
        self._chunks  = chunks
        self._stall   = stall
        self.started  = asyncio.Event()
        self.drained  = False
        self.closed   = False

    async def __aiter__(self):
        for chunk in self._chunks:
            self.started.set()
            yield chunk
        if self._stall:
            await asyncio.sleep(10)
        self.drained = True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def tracked_stream():
    """Factory for TrackedStream bodies."""
    return TrackedStream
