"""
App Store lookup client.

https://affiliate.itunes.apple.com/resources/documentation/itunes-store-web-service-search-api/
https://stackoverflow.com/questions/8839328/itunes-api-lookup-by-bundle-id
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable

import httpx

from storelookup.domain.config import AppStoreConfig, Option, build_config
from storelookup.domain.entities import AppRecord, LookupKey, LookupResponse
from storelookup.domain.errors import ParseError, ValidationError
from storelookup.domain.interfaces import IAppStoreClient
from .transport import fetch_body

log = logging.getLogger(__name__)

STORE = "appstore"
LOOKUP_URL = "https://itunes.apple.com/lookup"


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected integer, got {type(value).__name__}")
    return value


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected number, got {type(value).__name__}")
    return float(value)


def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected boolean, got {type(value).__name__}")
    return value


def _as_strings(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise TypeError(f"expected array, got {type(value).__name__}")
    return tuple(_as_str(v) for v in value)


def _as_datetime(value: Any) -> datetime:
    """Convert Apple's ISO datetime string ("2009-12-07T09:46:32Z") to datetime."""
    return datetime.fromisoformat(_as_str(value).replace("Z", "+00:00"))


# Anti-Corruption Layer
#   (our attribute, Apple's key, converter)
# If Apple renames a field, fix it HERE only.
RESULT_FIELDS: list[tuple[str, str, Callable[[Any], Any]]] = [
    ("screenshot_urls",                         "screenshotUrls",                     _as_strings),
    ("ipad_screenshot_urls",                    "ipadScreenshotUrls",                 _as_strings),
    ("appletv_screenshot_urls",                 "appletvScreenshotUrls",              _as_strings),
    ("artwork_url_60",                          "artworkUrl60",                       _as_str),
    ("artwork_url_100",                         "artworkUrl100",                      _as_str),
    ("artwork_url_512",                         "artworkUrl512",                      _as_str),
    ("artist_view_url",                         "artistViewUrl",                      _as_str),
    ("supported_devices",                       "supportedDevices",                   _as_strings),
    ("advisories",                              "advisories",                         _as_strings),
    ("is_game_center_enabled",                  "isGameCenterEnabled",                _as_bool),
    ("features",                                "features",                           _as_strings),
    ("kind",                                    "kind",                               _as_str),
    ("track_censored_name",                     "trackCensoredName",                  _as_str),
    ("language_codes_iso2a",                    "languageCodesISO2A",                 _as_strings),
    ("file_size_bytes",                         "fileSizeBytes",                      _as_str),
    ("seller_url",                              "sellerUrl",                          _as_str),
    ("content_advisory_rating",                 "contentAdvisoryRating",              _as_str),
    ("average_user_rating_for_current_version", "averageUserRatingForCurrentVersion", _as_float),
    ("user_rating_count_for_current_version",   "userRatingCountForCurrentVersion",   _as_int),
    ("average_user_rating",                     "averageUserRating",                  _as_float),
    ("track_view_url",                          "trackViewUrl",                       _as_str),
    ("track_content_rating",                    "trackContentRating",                 _as_str),
    ("track_name",                              "trackName",                          _as_str),
    ("track_id",                                "trackId",                            _as_int),
    ("genre_ids",                               "genreIds",                           _as_strings),
    ("release_date",                            "releaseDate",                        _as_datetime),
    ("formatted_price",                         "formattedPrice",                     _as_str),
    ("primary_genre_name",                      "primaryGenreName",                   _as_str),
    ("is_vpp_device_based_licensing_enabled",   "isVppDeviceBasedLicensingEnabled",   _as_bool),
    ("current_version_release_date",            "currentVersionReleaseDate",          _as_datetime),
    ("release_notes",                           "releaseNotes",                       _as_str),
    ("primary_genre_id",                        "primaryGenreId",                     _as_int),
    ("seller_name",                             "sellerName",                         _as_str),
    ("minimum_os_version",                      "minimumOsVersion",                   _as_str),
    ("currency",                                "currency",                           _as_str),
    ("description",                             "description",                        _as_str),
    ("artist_id",                               "artistId",                           _as_int),
    ("artist_name",                             "artistName",                         _as_str),
    ("genres",                                  "genres",                             _as_strings),
    ("price",                                   "price",                              _as_float),
    ("bundle_id",                               "bundleId",                           _as_str),
    ("version",                                 "version",                            _as_str),
    ("wrapper_type",                            "wrapperType",                        _as_str),
    ("user_rating_count",                       "userRatingCount",                    _as_int),
]


def _parse_result(node: Any) -> AppRecord:
    """
    Translate one raw result object into an AppRecord.
    Missing or null keys keep the AppRecord default.
    """
    if not isinstance(node, dict):
        raise TypeError(f"result must be an object, got {type(node).__name__}")
    values = {}
    for attr, key, convert in RESULT_FIELDS:
        raw = node.get(key)
        if raw is None:
            continue
        try:
            values[attr] = convert(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{key}: {exc}") from exc
    return AppRecord(**values)


def parse_lookup_response(body: bytes | str) -> LookupResponse:
    """
    Decode a whole lookup body. Unlike the Play Store scraper there is no
    partial result: any malformed piece fails the call with ParseError.
    """
    try:
        data = json.loads(body)
        if not isinstance(data, dict):
            raise TypeError(f"top level must be an object, got {type(data).__name__}")
        results = data.get("results") or []
        if not isinstance(results, list):
            raise TypeError("results must be an array")
        count = data.get("resultCount")
        return LookupResponse(
            result_count = _as_int(count) if count is not None else 0,
            results      = tuple(_parse_result(node) for node in results),
        )
    except (TypeError, ValueError) as exc:
        raise ParseError(STORE, f"malformed lookup response: {exc}") from exc


def record_to_dict(record: AppRecord) -> dict:
    """Inverse of the anti-corruption layer: AppRecord -> Apple's key names."""
    out = {}
    for attr, key, _ in RESULT_FIELDS:
        value = getattr(record, attr)
        if isinstance(value, datetime):
            value = value.isoformat().replace("+00:00", "Z")
        elif isinstance(value, tuple):
            value = list(value)
        out[key] = value
    return out


class AppStoreClient(IAppStoreClient):
    """
    Concrete IAppStoreClient for the iTunes lookup API.

        client = AppStoreClient(lang("ja_jp"), country("JP"))
        resp = await client.lookup(LookupKey.store(340368403))

    Stateless apart from its frozen config: one instance can serve any
    number of concurrent lookups.
    """

    def __init__(self, *options: Option) -> None:
        self._config = build_config(AppStoreConfig(), *options)

    @property
    def config(self) -> AppStoreConfig:
        return self._config

    def _default_params(self) -> dict[str, str]:
        params = {}
        if self._config.lang:
            params["lang"] = self._config.lang
        if self._config.country:
            params["country"] = self._config.country
        return params

    def lookup_url(self, key: LookupKey) -> httpx.URL:
        """
        Build the fully-qualified lookup URL.
        The store id takes precedence when the key carries both ids.
        """
        params = self._default_params()
        if key.is_empty():
            raise ValidationError(STORE, "both `storeID` and `bundleID` are empty")
        if key.store_id is not None:
            params["id"] = str(key.store_id)
        else:
            params["bundleId"] = key.bundle_id
        return httpx.URL(LOOKUP_URL, params=sorted(params.items()))

    async def lookup(self, key: LookupKey) -> LookupResponse:
        url  = self.lookup_url(key)
        body = await fetch_body(self._config, url, STORE)
        resp = parse_lookup_response(body)
        log.debug("%s | %s -> %d result(s)", STORE, key, resp.result_count)
        return resp
