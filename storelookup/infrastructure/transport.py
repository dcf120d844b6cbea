from __future__ import annotations

import asyncio
import logging

import httpx

from storelookup.domain.config import AppStoreConfig, PlayStoreConfig
from storelookup.domain.errors import ErrorKind, StatusError, StoreError

log = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0


async def fetch_body(config: AppStoreConfig | PlayStoreConfig, url: httpx.URL, store: str) -> bytes:
    """
    GET `url` through the configured transport and return the whole body.

    The request runs inside the calling task, so cancelling the task (or
    wrapping the call in asyncio.wait_for) aborts it. The response stream
    is closed on every exit path by the `async with` block.

    Non-2xx: the body is drained and StatusError(code) is raised.
    httpx.RequestError subclasses (connect, TLS, redirect loops, broken
    content encoding) propagate untouched.
    """
    if config.transport is not None:
        return await _send(config.transport, url, store)

    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
        return await _send(client, url, store)


async def _send(client: httpx.AsyncClient, url: httpx.URL, store: str) -> bytes:
    log.debug("%s | GET %s", store, url)
    async with client.stream("GET", url) as response:
        if not 200 <= response.status_code < 300:
            # drain so the connection can go back to the pool
            await response.aread()
            log.warning("%s | HTTP %d for %s", store, response.status_code, url)
            raise StatusError(store, response.status_code)
        return await response.aread()


def error_kind(exc: BaseException) -> ErrorKind | None:
    """
    Classify an exception raised by a lookup.
    Returns None for anything that is not one of the lookup failure classes.
    """
    if isinstance(exc, StoreError):
        return exc.kind
    if isinstance(exc, (asyncio.CancelledError, asyncio.TimeoutError)):
        return ErrorKind.CANCELLED
    if isinstance(exc, httpx.RequestError):
        return ErrorKind.TRANSPORT
    return None
