from __future__ import annotations

import logging

import httpx

from storelookup.domain.config import Option, PlayStoreConfig, build_config
from storelookup.domain.entities import Detail
from storelookup.domain.errors import ValidationError
from storelookup.domain.interfaces import IPlayStoreClient
from .playstore_html import STORE, parse_detail
from .transport import fetch_body

log = logging.getLogger(__name__)

DETAILS_URL = "https://play.google.com/store/apps/details"


class PlayStoreClient(IPlayStoreClient):
    """
    Concrete IPlayStoreClient. There is no public API, so this fetches the
    public details page and scrapes it (see playstore_html).

        client = PlayStoreClient(lang("ja"))
        detail = await client.get("com.cookpad.android.activities")
    """

    def __init__(self, *options: Option) -> None:
        self._config = build_config(PlayStoreConfig(), *options)

    @property
    def config(self) -> PlayStoreConfig:
        return self._config

    def details_url(self, bundle_id: str) -> httpx.URL:
        if not bundle_id:
            raise ValidationError(STORE, "bundle id is empty")
        params = {"id": bundle_id}
        if self._config.lang:
            params["hl"] = self._config.lang
        return httpx.URL(DETAILS_URL, params=sorted(params.items()))

    async def get(self, bundle_id: str) -> Detail:
        url    = self.details_url(bundle_id)
        body   = await fetch_body(self._config, url, STORE)
        detail = parse_detail(body)
        if not detail.title:
            log.info("%s | no title extracted for %s, page layout may have changed", STORE, bundle_id)
        return detail
