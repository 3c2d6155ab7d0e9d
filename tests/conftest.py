"""
Shared test fixtures for boxd-meta tests.

Nothing here touches the network: fetchers are replaced with in-memory fakes
that hand back parsed HTML or raise FetchError.
"""
import os
import threading

import pytest

from boxd_meta.scraper.errors import FetchError, FetchErrorKind
from boxd_meta.scraper.fetcher import parse_document


FILM_PAGE = """\
<html>
<head>
  <title>The Godfather (1972) • Letterboxd</title>
  <meta property="og:title" content="The Godfather (1972)" />
</head>
<body>
  <h1 class="headline-1 primaryname">The Godfather</h1>
  <span class="releasedate"><a href="/films/year/1972/">1972</a></span>
  <div class="review body-text -prose -hero prettify">
    <div class="truncate"><p>Spanning the years 1945 to 1955, a chronicle of the fictional Italian-American Corleone crime family.</p></div>
  </div>
  <a href="/films/genre/crime/" class="text-slug">Crime</a>
  <a href="/films/genre/drama/" class="text-slug">Drama</a>
  <a href="/films/theme/gangsters/" class="text-slug">Gangsters and mob</a>
  <a href="/films/mini-theme/mafia/" class="text-slug">Mafia</a>
  <a href="/film/the-godfather/themes/" class="text-slug">Show All…</a>
  <a href="/films/country/usa/" class="text-slug">USA</a>
  <div id="tab-cast"><div class="cast-list">
    <a href="/actor/marlon-brando/" class="text-slug">Marlon Brando</a>
    <a href="/actor/al-pacino/" class="text-slug">Al Pacino</a>
  </div></div>
  <div id="tab-crew">
    <h3><span class="crewrole -full">Director</span></h3>
    <div class="text-sluglist"><p><a href="/director/francis-ford-coppola/" class="text-slug">Francis Ford Coppola</a></p></div>
  </div>
  <h3><span>Alternative Titles</span></h3>
  <div class="text-indentedlist"><p>Il padrino, Der Pate</p></div>
  <p class="text-link text-footer">175&nbsp;mins &nbsp; More at IMDb</p>
</body>
</html>
"""


def make_doc(html: str, url: str = "https://letterboxd.com/film/test/"):
    return parse_document(html, url)


class FakeFetcher:
    """In-memory fetcher: pages keyed by URL, failures keyed by URL."""

    def __init__(self, pages=None, failures=None):
        self.pages = dict(pages or {})
        self.failures = dict(failures or {})
        self.calls = []
        self._lock = threading.Lock()

    def fetch(self, url):
        with self._lock:
            self.calls.append(url)
        if url in self.failures:
            raise self.failures[url]
        if url not in self.pages:
            raise FetchError(url, FetchErrorKind.HTTP_STATUS, status_code=404)
        return make_doc(self.pages[url], url)


@pytest.fixture
def film_page():
    return FILM_PAGE


@pytest.fixture
def film_doc():
    return make_doc(FILM_PAGE, "https://letterboxd.com/film/the-godfather/")


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def write_csv(tmp_path):
    """Write a Letterboxd-style export: 4 preamble lines, then the table."""

    def _write(rows, header=("Date", "Name", "Year", "URL"), preamble=True, name="list.csv"):
        lines = []
        if preamble:
            lines += [
                "Letterboxd list export v7",
                "Date,Name,Tags,URL,Description",
                "2025-11-10,Movie Collection,,https://letterboxd.com/user/list/collection/,",
                "",
            ]
        lines.append(",".join(header))
        for row in rows:
            lines.append(",".join(row))
        p = tmp_path / name
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _write


@pytest.fixture
def umask_022():
    """Run the test under umask 022 and restore the previous mask after."""
    old = os.umask(0o022)
    yield
    os.umask(old)
