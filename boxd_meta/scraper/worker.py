"""
Scrape worker - fetch + extract for exactly one target.

``ScrapeWorker.process`` always returns a record. Any failure while fetching
or extracting is logged and turned into a degraded record carrying only the
target's URL and hint title, so a batch's output never has fewer rows than
its input.
"""
from __future__ import annotations

from typing import Callable, Protocol

from boxd_meta.utils.logger import clear_item_context, logger, set_item_context
from .extractor import extract_metadata
from .types import FetchedDocument, ItemState, MediaRecord, ScrapeTarget


StateCallback = Callable[[ScrapeTarget, ItemState], None]


class Fetcher(Protocol):
    def fetch(self, url: str) -> FetchedDocument: ...


class ScrapeWorker:
    def __init__(
        self,
        fetcher: Fetcher,
        *,
        use_hint_title: bool = False,
        state_cb: StateCallback | None = None,
    ):
        self.fetcher = fetcher
        self.use_hint_title = use_hint_title
        self._state_cb = state_cb

    def _emit(self, target: ScrapeTarget, state: ItemState) -> None:
        if self._state_cb:
            try:
                self._state_cb(target, state)
            except Exception:
                logger.debug(f"state callback failed for {target.source_url}", exc_info=True)

    def process(self, target: ScrapeTarget) -> MediaRecord:
        set_item_context(target.source_url)
        self._emit(target, ItemState.PENDING)
        try:
            self._emit(target, ItemState.FETCHING)
            doc = self.fetcher.fetch(target.source_url)
            self._emit(target, ItemState.EXTRACTING)
            record = extract_metadata(
                doc,
                target.source_url,
                target.hint_title,
                use_hint_title=self.use_hint_title,
            )
            logger.debug(f"scraped: {record.title!r}")
        except Exception as e:
            self._emit(target, ItemState.FAILED)
            logger.warning(f"Error scraping {target.source_url}: {e}")
            self._emit(target, ItemState.DEGRADED)
            return MediaRecord.degraded(target)
        finally:
            clear_item_context()

        self._emit(target, ItemState.DONE)
        return record

    __call__ = process
