from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Sequence

from boxd_meta.utils.logger import logger
from .errors import InputError
from .types import MediaRecord, ScrapeTarget


ProcessFn = Callable[[ScrapeTarget], MediaRecord]
ProgressCallback = Callable[[int, int, str], None]

LABEL_WIDTH = 40


def progress_label(title: str, width: int = LABEL_WIDTH) -> str:
    """Fixed-width label so a progress line doesn't jitter between items."""
    return (title or "")[:width].ljust(width)


class BoundedScheduler:
    """Run targets through a sliding window of at most ``max_concurrency`` tasks.

    Targets are submitted in input order. Once the window is full, the oldest
    outstanding task is awaited and collected before the next submit, so no
    more than ``max_concurrency`` fetches are ever in flight. Results come
    back in collection order; callers sort them afterwards.

    ``process_fn`` is expected not to raise (see ``ScrapeWorker``).
    """

    def __init__(
        self,
        process_fn: ProcessFn,
        max_concurrency: int,
        progress_cb: ProgressCallback | None = None,
    ):
        if int(max_concurrency) < 1:
            raise InputError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.process_fn = process_fn
        self.max_concurrency = int(max_concurrency)
        self._progress_cb = progress_cb
        self._progress_lock = threading.Lock()
        self._completed = 0
        self._total = 0

    def _bump_progress(self, target: ScrapeTarget) -> None:
        if not self._progress_cb:
            return
        with self._progress_lock:
            self._completed += 1
            try:
                self._progress_cb(self._completed, self._total, progress_label(target.hint_title))
            except Exception:
                logger.debug("progress callback failed", exc_info=True)

    def _run_one(self, target: ScrapeTarget) -> MediaRecord:
        try:
            return self.process_fn(target)
        finally:
            self._bump_progress(target)

    def run(self, targets: Sequence[ScrapeTarget]) -> list[MediaRecord]:
        targets = list(targets)
        self._total = len(targets)
        self._completed = 0
        if not targets:
            return []

        results: list[MediaRecord] = []
        window: deque[Future[MediaRecord]] = deque()
        logger.info(f"parallel: workers={self.max_concurrency} items={len(targets)}")

        with ThreadPoolExecutor(max_workers=self.max_concurrency, thread_name_prefix="scrape") as ex:
            for target in targets:
                if len(window) >= self.max_concurrency:
                    results.append(window.popleft().result())
                window.append(ex.submit(self._run_one, target))

            while window:
                results.append(window.popleft().result())

        return results


def run_bounded(
    targets: Sequence[ScrapeTarget],
    process_fn: ProcessFn,
    max_concurrency: int,
    progress_cb: ProgressCallback | None = None,
) -> list[MediaRecord]:
    return BoundedScheduler(process_fn, max_concurrency, progress_cb).run(targets)
