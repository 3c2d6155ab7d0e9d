from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from bs4 import BeautifulSoup


class ItemState(str, Enum):
    PENDING = "pending"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    DONE = "done"
    FAILED = "failed"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class ScrapeTarget:
    """One input row: the page to fetch plus a fallback title."""

    source_url: str
    hint_title: str = ""


@dataclass(frozen=True)
class FetchedDocument:
    """Parsed markup for one page.

    ``url`` is the URL that was requested, verbatim; ``final_url`` is where
    redirects ended up and is informational only.
    """

    url: str
    soup: BeautifulSoup
    status_code: int = 200
    final_url: str | None = None


@dataclass
class MediaRecord:
    """Normalized metadata for one film page."""

    url: str
    title: str = ""
    description: str | None = None
    alternate_titles: list[str] = field(default_factory=list)
    genres: list[str] = field(default_factory=list)
    themes: list[str] = field(default_factory=list)
    countries: list[str] = field(default_factory=list)
    cast: list[str] = field(default_factory=list)
    crew: dict[str, list[str]] = field(default_factory=dict)
    release_year: int | None = None
    runtime_mins: int | None = None

    @classmethod
    def degraded(cls, target: ScrapeTarget) -> MediaRecord:
        return cls(url=target.source_url, title=target.hint_title)

    @property
    def is_degraded(self) -> bool:
        return not (
            self.description
            or self.alternate_titles
            or self.genres
            or self.themes
            or self.countries
            or self.cast
            or self.crew
            or self.release_year is not None
            or self.runtime_mins is not None
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire shape shared with the catalog's persistence layer."""
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "alternateTitles": list(self.alternate_titles),
            "genres": list(self.genres),
            "themes": list(self.themes),
            "country": list(self.countries),
            "cast": list(self.cast),
            "crew": {role: list(names) for role, names in self.crew.items()},
            "release_date": self.release_year,
            "runtime_mins": self.runtime_mins,
        }
