from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from storelookup.domain.entities import LookupKey, LookupReport
from storelookup.domain.interfaces import IAppStoreClient, IPlayStoreClient
from storelookup.infrastructure.appstore_client import record_to_dict
from storelookup.infrastructure.transport import error_kind

log = logging.getLogger(__name__)


class LookupService:
    """
    The top-level use case: look up a batch of apps and report each outcome.

    Receives both store clients via constructor injection. Lookups for one
    batch run concurrently; a failure in one never affects the others and is
    turned into a failed LookupReport instead of an exception.
    """

    def __init__(self, appstore: IAppStoreClient, playstore: IPlayStoreClient, timeout: float | None = None) -> None:
        self._appstore  = appstore
        self._playstore = playstore
        self._timeout   = timeout

    async def lookup_appstore(self, keys: list[LookupKey]) -> list[LookupReport]:
        async def one(key: LookupKey) -> dict:
            resp = await self._appstore.lookup(key)
            return {
                "resultCount": resp.result_count,
                "results":     [record_to_dict(r) for r in resp.results],
            }

        return await asyncio.gather(*[self._run("appstore", str(k), lambda k=k: one(k)) for k in keys])

    async def lookup_playstore(self, bundle_ids: list[str]) -> list[LookupReport]:
        async def one(bundle_id: str) -> dict:
            detail = await self._playstore.get(bundle_id)
            return detail.to_dict()

        return await asyncio.gather(*[self._run("playstore", b, lambda b=b: one(b)) for b in bundle_ids])

    async def _run(self, store: str, key: str, call: Callable[[], Awaitable[dict]]) -> LookupReport:
        try:
            record = await asyncio.wait_for(call(), self._timeout)
        except Exception as exc:
            kind = error_kind(exc)
            if kind is None:
                raise
            message = str(exc) or type(exc).__name__
            log.error("%s | lookup %s failed (%s): %s", store, key, kind.value, message)
            return LookupReport(
                store         = store,
                key           = key,
                status        = "failed",
                error_kind    = kind.value,
                status_code   = getattr(exc, "code", 0),
                error_message = message,
            )

        log.info("%s | lookup %s ok", store, key)
        return LookupReport(store=store, key=key, status="success", record=record)
