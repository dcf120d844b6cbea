"""
Unit tests for the Play Store details page extraction.

The captured page under tests/testdata is the golden file. The remaining
tests knock out one anchor at a time and check that only the matching
field goes empty.
"""
import pytest
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from storelookup.domain.entities import Detail
from storelookup.domain.errors import ErrorKind, ParseError
from storelookup.infrastructure import playstore_html
from storelookup.infrastructure.playstore_html import (
    extract_content_rating,
    extract_cover_art,
    extract_developer,
    extract_genre,
    extract_meta,
    extract_title,
    parse_detail,
)

GOLDEN = Detail(
    title          = "クックパッド-No.1料理レシピ検索アプリ",
    description    = "月次利用者数約5800万人・掲載レシピ数320万品以上！\n日本最大の料理レシピ検索・投稿サービス「クックパッド」の公式アプリ。",
    cover_art_url  = "https://lh3.googleusercontent.com/G8KxoLSAJIYrDSObg07KNi55XAij9uO4hr4VQYXTTmfCpvfHswL0SwnGgx3Zcfvj2Hk=s180",
    content_rating = "3 歳以上",
    genre_id       = "FOOD_AND_DRINK",
    genre          = "フード＆ドリンク",
    developer_id   = "6698899737769238815",
    developer      = "Cookpad Inc.",
    developer_url  = "https://cookpad.com/",
    bundle_id      = "com.cookpad.android.activities",
    store_id       = "com.cookpad.android.activities",
)


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


# https://play.google.com/store/apps/details?hl=ja&id=com.cookpad.android.activities
@pytest.mark.unit
def test_parse_golden_page(testdata):
    assert parse_detail(testdata("com.cookpad.android.activities.html")) == GOLDEN


@pytest.mark.unit
def test_detail_to_dict_keys():
    assert GOLDEN.to_dict() == {
        "title":         GOLDEN.title,
        "description":   GOLDEN.description,
        "coverArtUrl":   GOLDEN.cover_art_url,
        "contentRating": GOLDEN.content_rating,
        "genreId":       "FOOD_AND_DRINK",
        "genre":         GOLDEN.genre,
        "developerId":   "6698899737769238815",
        "developer":     "Cookpad Inc.",
        "developerUrl":  "https://cookpad.com/",
        "bundleId":      "com.cookpad.android.activities",
        "storeId":       "com.cookpad.android.activities",
    }


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------

@pytest.mark.unit
@pytest.mark.parametrize("raw, want", [
    ("Sample App - Google Play", "Sample App"),
    ("A-B-C - Google Play", "A-B-C"),
    ("No suffix", "No suffix"),
    ("-leading", "-leading"),
    ("x-y", "x-y"),
    ("", ""),
])
def test_extract_title(raw, want):
    html = f'<html><head><title id="main-title">{raw}</title></head></html>'
    assert extract_title(soup(html)) == want


@pytest.mark.unit
def test_extract_title_needs_main_title_id():
    assert extract_title(soup("<html><head><title>Other - Site</title></head></html>")) == ""


@pytest.mark.unit
def test_extract_meta_ignores_unknown_and_nameless():
    html = """<html><head>
      <meta charset="utf-8">
      <meta content="orphan">
      <meta name="keywords" content="recipes">
      <meta name="description" content="hello">
      <meta name="appstore:store_id">
    </head></html>"""
    assert extract_meta(soup(html)) == {"description": "hello", "store_id": ""}


@pytest.mark.unit
def test_extract_meta_only_reads_head():
    html = '<html><head></head><body><meta name="description" content="body"></body></html>'
    assert extract_meta(soup(html)) == {}


@pytest.mark.unit
def test_extract_cover_art_first_match():
    html = '<img itemprop="image" src="first.png"><img itemprop="image" src="second.png">'
    assert extract_cover_art(soup(html)) == "first.png"


@pytest.mark.unit
def test_extract_developer():
    html = '<a href="/store/apps/dev?id=42&amp;hl=ja">Dev Co.</a>'
    assert extract_developer(soup(html)) == ("42", "Dev Co.")


@pytest.mark.unit
def test_extract_developer_missing():
    assert extract_developer(soup('<a href="/store/apps/developer?id=42">Dev</a>')) == ("", "")


@pytest.mark.unit
def test_extract_genre():
    html = '<a itemprop="genre" href="/store/apps/category/GAME_PUZZLE">Puzzle</a>'
    assert extract_genre(soup(html)) == ("GAME_PUZZLE", "Puzzle")


@pytest.mark.unit
def test_extract_content_rating():
    html = '<img class="KmO8jd E1GfKc" alt="Rated for 3+">'
    assert extract_content_rating(soup(html)) == "Rated for 3+"


@pytest.mark.unit
def test_content_rating_selector_is_replaceable(monkeypatch):
    monkeypatch.setattr(playstore_html, "CONTENT_RATING_SELECTOR", 'img[alt^="Rated for"]')
    html = '<img class="NewBadge" alt="Rated for 12+">'
    assert extract_content_rating(soup(html)) == "Rated for 12+"


# ---------------------------------------------------------------------------
# Independence: one missing anchor only empties its own field(s)
# ---------------------------------------------------------------------------

def _strip(page: str, old: str, new: str = "") -> str:
    assert old in page
    return page.replace(old, new)


@pytest.mark.unit
@pytest.mark.parametrize("old, new, emptied", [
    ('<title id="main-title">', "<title>", {"title": ""}),
    ('itemprop="image"', "", {"cover_art_url": ""}),
    ('href="/store/apps/dev?id=6698899737769238815"', 'href="/developer"', {"developer_id": "", "developer": ""}),
    ('itemprop="genre" href="/store/apps/category/FOOD_AND_DRINK"', 'href="/genre"', {"genre_id": "", "genre": ""}),
    ('class="E1GfKc"', 'class="restyled"', {"content_rating": ""}),
    ('<meta name="appstore:developer_url" content="https://cookpad.com/">', "", {"developer_url": ""}),
    ('<meta name="appstore:store_id"', '<meta name="unknown"', {"store_id": ""}),
])
def test_missing_anchor_only_empties_its_field(testdata, old, new, emptied):
    page = testdata("com.cookpad.android.activities.html").decode("utf-8")
    got = parse_detail(_strip(page, old, new))

    want = GOLDEN.__dict__ | emptied
    assert got == Detail(**want)


@pytest.mark.unit
def test_failing_rule_does_not_abort_others(testdata, monkeypatch):
    def broken(_soup):
        raise AttributeError("layout changed")

    monkeypatch.setattr(playstore_html, "extract_genre", broken)
    got = parse_detail(testdata("com.cookpad.android.activities.html"))

    assert (got.genre_id, got.genre) == ("", "")
    assert got.title == GOLDEN.title
    assert got.developer_id == GOLDEN.developer_id
    assert got.content_rating == GOLDEN.content_rating


@pytest.mark.unit
def test_empty_document_gives_empty_detail():
    assert parse_detail(b"") == Detail()


@pytest.mark.unit
def test_rejected_markup_is_parse_error(monkeypatch):
    def reject(*args, **kwargs):
        raise ParserRejectedMarkup("cannot build tree")

    monkeypatch.setattr(playstore_html, "BeautifulSoup", reject)
    with pytest.raises(ParseError) as exc_info:
        parse_detail(b"<html>")
    assert exc_info.value.kind is ErrorKind.PARSE
    assert exc_info.value.code == 0
