"""
Play Store details page -> Detail
---------------------------------
The page has no published contract. The only anchors we rely on are a few
conventional pieces of markup (head metadata, the main-title element, the
developer and category links, the itemprop image). Anything else can move
without notice.

Each extraction rule below is a pure function soup -> value and is applied
on its own through _apply(): if a rule blows up, only its own field stays
at the default and the others still run. The only hard failure is a
document the parser refuses to build a tree for.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar
from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from storelookup.domain.entities import Detail
from storelookup.domain.errors import ParseError

log = logging.getLogger(__name__)

STORE = "playstore"

TITLE_SELECTOR     = 'head > title[id="main-title"]'
META_SELECTOR      = "head > meta"
COVER_ART_SELECTOR = 'img[itemprop="image"]'
DEVELOPER_SELECTOR = 'a[href^="/store/apps/dev?id="]'
GENRE_SELECTOR     = 'a[itemprop="genre"]'
GENRE_PATH_PREFIX  = "/store/apps/category/"

# meta name -> Detail field
META_FIELDS = {
    "description":             "description",
    "appstore:developer_url":  "developer_url",
    "appstore:bundle_id":      "bundle_id",
    "appstore:store_id":       "store_id",
}

# Cosmetic class on the rating badge, not semantic markup. Expect to
# update it whenever the page is restyled; only extract_content_rating reads it.
# Alternatives seen on the badge: ja img[alt$="歳以上"], en img[alt^="Rated for"]
CONTENT_RATING_SELECTOR = ".E1GfKc"

T = TypeVar("T")


def extract_title(soup: BeautifulSoup) -> str:
    """
    Text of the main title, minus the trailing site name.
    "App - Google Play" -> "App". The last hyphen only counts when at
    least one character precedes its separator.
    """
    node = soup.select_one(TITLE_SELECTOR)
    if node is None:
        return ""
    title = node.get_text()
    i = title.rfind("-")
    if i > 1:
        title = title[:i - 1]
    return title


def extract_meta(soup: BeautifulSoup) -> dict[str, str]:
    """Detail fields carried by <meta name=... content=...> in the head."""
    out: dict[str, str] = {}
    for tag in soup.select(META_SELECTOR):
        name = tag.get("name")
        if name is None:
            continue
        field = META_FIELDS.get(name)
        if field is not None:
            out[field] = tag.get("content", "")
    return out


def extract_cover_art(soup: BeautifulSoup) -> str:
    node = soup.select_one(COVER_ART_SELECTOR)
    if node is None:
        return ""
    return node.get("src", "")


def extract_developer(soup: BeautifulSoup) -> tuple[str, str]:
    """(developer_id, developer) from the first developer-listing link."""
    node = soup.select_one(DEVELOPER_SELECTOR)
    if node is None:
        return "", ""
    query = parse_qs(urlsplit(node.get("href", "")).query)
    developer_id = query.get("id", [""])[0]
    return developer_id, node.get_text()


def extract_genre(soup: BeautifulSoup) -> tuple[str, str]:
    """(genre_id, genre) from the first itemprop=genre link."""
    node = soup.select_one(GENRE_SELECTOR)
    if node is None:
        return "", ""
    href = node.get("href", "")
    genre_id = href[len(GENRE_PATH_PREFIX):] if href.startswith(GENRE_PATH_PREFIX) else href
    return genre_id, node.get_text()


def extract_content_rating(soup: BeautifulSoup) -> str:
    node = soup.select_one(CONTENT_RATING_SELECTOR)
    if node is None:
        return ""
    return node.get("alt", "")


def _apply(rule: Callable[[BeautifulSoup], T], soup: BeautifulSoup, default: T) -> T:
    try:
        return rule(soup)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
        log.debug("Extraction rule %s failed, leaving default: %s", rule.__name__, exc)
        return default


def make_soup(body: bytes | str) -> BeautifulSoup:
    try:
        return BeautifulSoup(body, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseError(STORE, f"unparsable document: {exc}") from exc


def parse_detail(body: bytes | str) -> Detail:
    """Run every extraction rule over the document and assemble a Detail."""
    soup = make_soup(body)

    developer_id, developer = _apply(extract_developer, soup, ("", ""))
    genre_id, genre         = _apply(extract_genre, soup, ("", ""))

    return Detail(
        title          = _apply(extract_title, soup, ""),
        cover_art_url  = _apply(extract_cover_art, soup, ""),
        content_rating = _apply(extract_content_rating, soup, ""),
        genre_id       = genre_id,
        genre          = genre,
        developer_id   = developer_id,
        developer      = developer,
        **_apply(extract_meta, soup, {}),
    )
