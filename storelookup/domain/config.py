"""
Client configuration
--------------------
A client is configured by folding a sequence of options over a zero-value
config. Each option is a plain function config -> config that returns a
new frozen dataclass, so later options win over earlier ones touching the
same field:

    AppStoreClient(lang("ja_jp"), country("JP"), http_client(shared))

Nothing is validated here. A bad language or country tag only shows up
later as an upstream status or parse failure.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Callable, TypeVar

import httpx


@dataclass(frozen=True)
class AppStoreConfig:
    """
    transport is shared, not owned: the caller opens and closes it.
    None means a short-lived default client is opened per lookup.
    """
    transport: httpx.AsyncClient | None = None
    lang:      str = ""
    country:   str = ""


@dataclass(frozen=True)
class PlayStoreConfig:
    transport: httpx.AsyncClient | None = None
    lang:      str = ""


C = TypeVar("C", AppStoreConfig, PlayStoreConfig)
Option = Callable[[C], C]


def http_client(client: httpx.AsyncClient) -> Option:
    """Replace the default transport, e.g. with a MockTransport-backed client."""
    return lambda cfg: replace(cfg, transport=client)


def lang(value: str) -> Option:
    """Language tag: `lang` on the App Store, `hl` on the Play Store."""
    return lambda cfg: replace(cfg, lang=value)


def country(value: str) -> Option:
    """
    ISO 3166-1 alpha-2 region, App Store only.
    http://en.wikipedia.org/wiki/ISO_3166-1_alpha-2
    """
    return lambda cfg: replace(cfg, country=value)


def build_config(default: C, *options: Option) -> C:
    cfg = default
    for opt in options:
        cfg = opt(cfg)
    return cfg
