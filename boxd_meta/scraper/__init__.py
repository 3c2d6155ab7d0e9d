"""Metadata acquisition pipeline: fetch, extract, schedule, aggregate."""

from .errors import FetchError, FetchErrorKind, InputError, OutputError, ScrapeError
from .types import FetchedDocument, ItemState, MediaRecord, ScrapeTarget

__all__ = [
    "FetchError",
    "FetchErrorKind",
    "FetchedDocument",
    "InputError",
    "ItemState",
    "MediaRecord",
    "OutputError",
    "ScrapeError",
    "ScrapeTarget",
]
