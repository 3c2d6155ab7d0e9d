"""Field extractors for Letterboxd film pages.

Every extractor takes one parsed :class:`FetchedDocument` and returns the
field or an empty value (``""``, ``None``, ``[]``, ``{}``). None of them
raise when markup is missing, and none depends on another, so a layout change
that breaks one field leaves the rest intact.
"""
from __future__ import annotations

import re
from typing import Iterable

from bs4 import Tag

from .types import FetchedDocument, MediaRecord


SITE_NAME = "Letterboxd"
SITE_SUFFIXES = (f" • {SITE_NAME}", f" - {SITE_NAME}")

SLUG_CLASS = "text-slug"
GENRE_PATH = "/genre/"
THEME_PATH = "/theme/"
MINI_THEME_PATH = "/mini-theme/"
COUNTRY_PATH = "/films/country/"

_YEAR_SUFFIX_RE = re.compile(r"\s*\(\d{4}\)\s*$")
_RUNTIME_RE = re.compile(r"(\d+)\s*mins")
_SHOW_ALL_RE = re.compile(r"show all", re.IGNORECASE)
_ALT_TITLE_HEADING_RE = re.compile(r"alternat(?:e|ive) titles?", re.IGNORECASE)


def _text(el: Tag | None) -> str:
    if el is None:
        return ""
    # Collapses &nbsp; too: str.split() treats \xa0 as whitespace.
    return " ".join(el.get_text(" ").split())


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


def _strip_year(title: str) -> str:
    return _YEAR_SUFFIX_RE.sub("", title).strip()


# -- Title --

def _title_from_primary_heading(doc: FetchedDocument) -> str:
    return _text(doc.soup.select_one("h1.headline-1.primaryname"))


def _title_from_film_heading(doc: FetchedDocument) -> str:
    return _text(doc.soup.select_one("h1.filmtitle span.name"))


def _title_from_og_meta(doc: FetchedDocument) -> str:
    meta = doc.soup.select_one('meta[property="og:title"]')
    if meta is None:
        return ""
    return _strip_year(" ".join(str(meta.get("content") or "").split()))


def _title_from_title_tag(doc: FetchedDocument) -> str:
    title = _text(doc.soup.find("title"))
    for suffix in SITE_SUFFIXES:
        title = title.split(suffix, 1)[0]
    return _strip_year(title)


_TITLE_STRATEGIES = (
    _title_from_primary_heading,
    _title_from_film_heading,
    _title_from_og_meta,
    _title_from_title_tag,
)


def extract_title(doc: FetchedDocument) -> str:
    """Return the film title, or ``""``.

    Strategies run most specific first and stop at the first non-blank result.
    """
    for strategy in _TITLE_STRATEGIES:
        title = strategy(doc)
        if title:
            return title
    return ""


# -- Category links --

def scrape_by_href(doc: FetchedDocument, pattern: str) -> list[str]:
    """Texts of ``.text-slug`` links whose href contains *pattern*.

    "Show All…" links are skipped; results keep first-seen order without
    duplicates.
    """
    texts = []
    for a in doc.soup.select(f".{SLUG_CLASS}"):
        if pattern not in str(a.get("href") or ""):
            continue
        text = _text(a)
        if _SHOW_ALL_RE.search(text):
            continue
        texts.append(text)
    return _unique(texts)


def extract_genres(doc: FetchedDocument) -> list[str]:
    return scrape_by_href(doc, GENRE_PATH)


def extract_themes(doc: FetchedDocument) -> list[str]:
    return _unique(scrape_by_href(doc, THEME_PATH) + scrape_by_href(doc, MINI_THEME_PATH))


def extract_countries(doc: FetchedDocument) -> list[str]:
    return scrape_by_href(doc, COUNTRY_PATH)


# -- People --

def extract_cast(doc: FetchedDocument) -> list[str]:
    return _unique(_text(a) for a in doc.soup.select(f"#tab-cast .cast-list a.{SLUG_CLASS}"))


def extract_crew(doc: FetchedDocument) -> dict[str, list[str]]:
    """Map crew role -> member names, in document order.

    Each ``h3`` in the crew tab carries the role label; the element right
    after it holds that role's links. Roles without members are left out.
    """
    crew_tab = doc.soup.select_one("#tab-crew")
    if crew_tab is None:
        return {}

    crew: dict[str, list[str]] = {}
    for header in crew_tab.find_all("h3"):
        role = _text(header.select_one("span.crewrole.-full"))
        if not role:
            continue
        block = header.find_next_sibling()
        if block is None:
            continue
        members = [_text(a) for a in block.select(f"a.{SLUG_CLASS}")]
        members = [m for m in members if m]
        if not members:
            continue
        crew[role] = _unique(crew.get(role, []) + members)
    return crew


# -- Details --

def extract_release_year(doc: FetchedDocument) -> int | None:
    text = _text(doc.soup.select_one("span.releasedate a"))
    # int() alone would take "1_972", "+1972" or non-ASCII digits
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


def extract_runtime(doc: FetchedDocument) -> int | None:
    text = _text(doc.soup.select_one("p.text-link.text-footer"))
    m = _RUNTIME_RE.search(text)
    return int(m.group(1)) if m else None


def extract_description(doc: FetchedDocument) -> str | None:
    p = doc.soup.select_one("div.review.body-text.-prose.-hero.prettify div.truncate p")
    return _text(p) or None


def extract_alternate_titles(doc: FetchedDocument) -> list[str]:
    for section in doc.soup.select("div.text-indentedlist"):
        heading = section.find_previous_sibling()
        if heading is None or heading.name != "h3":
            continue
        if not _ALT_TITLE_HEADING_RE.search(_text(heading)):
            continue
        return _unique(part.strip() for part in _text(section).split(","))
    return []


def extract_metadata(
    doc: FetchedDocument,
    url: str,
    hint_title: str = "",
    *,
    use_hint_title: bool = False,
) -> MediaRecord:
    """Run every extractor over *doc*.

    ``url`` is copied into the record untouched. The title comes from the page
    unless *use_hint_title* is set; a page without a usable title falls back
    to *hint_title* either way.
    """
    title = hint_title if (use_hint_title and hint_title) else extract_title(doc)
    return MediaRecord(
        url=url,
        title=title or hint_title,
        description=extract_description(doc),
        alternate_titles=extract_alternate_titles(doc),
        genres=extract_genres(doc),
        themes=extract_themes(doc),
        countries=extract_countries(doc),
        cast=extract_cast(doc),
        crew=extract_crew(doc),
        release_year=extract_release_year(doc),
        runtime_mins=extract_runtime(doc),
    )
