from __future__ import annotations

from enum import Enum


class ScrapeError(Exception):
    """Base class for errors raised by the scraping pipeline."""


class FetchErrorKind(str, Enum):
    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"


class FetchError(ScrapeError):
    """A single page could not be fetched.

    Recovered by the scrape worker; never reaches the scheduler.
    """

    def __init__(
        self,
        url: str,
        kind: FetchErrorKind,
        message: str = "",
        *,
        status_code: int | None = None,
    ):
        self.url = url
        self.kind = kind
        self.status_code = status_code
        detail = message or (f"HTTP {status_code}" if status_code is not None else kind.value)
        super().__init__(f"{kind.value}: {detail} ({url})")


class InputError(ScrapeError):
    """Bad input table or batch configuration. Raised before any fetch."""


class OutputError(ScrapeError):
    """The batch result could not be written."""
