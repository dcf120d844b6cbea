from __future__ import annotations
from dataclasses import dataclass, fields
from datetime import datetime


@dataclass(frozen=True)
class LookupKey:
    """
    Immutable key selecting one App Store listing.

    Build it with LookupKey.store(...) or LookupKey.bundle(...).
    A key with neither value set is rejected when the request is built.
    If both are set the store id wins.
    """
    store_id:  int | None = None
    bundle_id: str | None = None

    @classmethod
    def store(cls, value: int) -> LookupKey:
        return cls(store_id=int(value))

    @classmethod
    def bundle(cls, value: str) -> LookupKey:
        return cls(bundle_id=value)

    def is_empty(self) -> bool:
        return self.store_id is None and not self.bundle_id

    def __str__(self) -> str:
        if self.store_id is not None:
            return f"id={self.store_id}"
        if self.bundle_id:
            return f"bundleId={self.bundle_id}"
        return "<empty>"


@dataclass(frozen=True)
class AppRecord:
    """
    Immutable App Store listing as returned by the lookup API.

    Field names are OURS (snake_case). The upstream camelCase names live
    in the anti-corruption layer (appstore_client.RESULT_FIELDS), which
    also drives record_to_dict().
    """
    screenshot_urls:                          tuple[str, ...] = ()
    ipad_screenshot_urls:                     tuple[str, ...] = ()
    appletv_screenshot_urls:                  tuple[str, ...] = ()
    artwork_url_60:                           str = ""
    artwork_url_100:                          str = ""
    artwork_url_512:                          str = ""
    artist_view_url:                          str = ""
    supported_devices:                        tuple[str, ...] = ()
    advisories:                               tuple[str, ...] = ()
    is_game_center_enabled:                   bool = False
    features:                                 tuple[str, ...] = ()
    kind:                                     str = ""
    track_censored_name:                      str = ""
    language_codes_iso2a:                     tuple[str, ...] = ()
    file_size_bytes:                          str = ""
    seller_url:                               str = ""
    content_advisory_rating:                  str = ""
    average_user_rating_for_current_version:  float = 0.0
    user_rating_count_for_current_version:    int = 0
    average_user_rating:                      float = 0.0
    track_view_url:                           str = ""
    track_content_rating:                     str = ""
    track_name:                               str = ""
    track_id:                                 int = 0
    genre_ids:                                tuple[str, ...] = ()
    release_date:                             datetime | None = None
    formatted_price:                          str = ""
    primary_genre_name:                       str = ""
    is_vpp_device_based_licensing_enabled:    bool = False
    current_version_release_date:             datetime | None = None
    release_notes:                            str = ""
    primary_genre_id:                         int = 0
    seller_name:                              str = ""
    minimum_os_version:                       str = ""
    currency:                                 str = ""
    description:                              str = ""
    artist_id:                                int = 0
    artist_name:                              str = ""
    genres:                                   tuple[str, ...] = ()
    price:                                    float = 0.0
    bundle_id:                                str = ""
    version:                                  str = ""
    wrapper_type:                             str = ""
    user_rating_count:                        int = 0


@dataclass(frozen=True)
class LookupResponse:
    """Immutable value object wrapping one App Store lookup response."""
    result_count: int
    results:      tuple[AppRecord, ...] = ()


@dataclass(frozen=True)
class Detail:
    """
    Immutable Play Store listing scraped from the details page.

    Every field defaults to "". Extraction is best-effort: a missing
    anchor in the page only leaves its own field empty.
    """
    title:          str = ""
    description:    str = ""
    cover_art_url:  str = ""
    content_rating: str = ""

    # https://play.google.com/store/apps/category/{genre_id}
    genre_id: str = ""
    genre:    str = ""

    # https://play.google.com/store/apps/dev?id={developer_id}
    developer_id: str = ""
    developer:    str = ""

    # app-ads.txt
    developer_url: str = ""
    bundle_id:     str = ""
    store_id:      str = ""

    def to_dict(self) -> dict:
        """Serialise with the camelCase keys used in JSON output."""
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.capitalize() for p in rest)


@dataclass(frozen=True)
class LookupReport:
    """
    Immutable value object summarising one lookup done by the application
    service. record is set on success; the error fields on failure.
    """
    store:         str
    key:           str
    status:        str
    record:        dict | None = None
    error_kind:    str | None = None
    status_code:   int = 0
    error_message: str | None = None

    def to_dict(self) -> dict:
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}
