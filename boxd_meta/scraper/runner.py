from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from boxd_meta.utils.config import ScrapeConfig
from boxd_meta.utils.logger import logger

from .aggregator import build_output_path, finalize, write_batch
from .fetcher import DocumentFetcher
from .scheduler import BoundedScheduler, ProgressCallback
from .targets import read_targets
from .worker import Fetcher, ScrapeWorker


@dataclass
class BatchSummary:
    output_path: Path
    total: int
    degraded: int


def run_batch(
    cfg: ScrapeConfig,
    input_path: str | Path,
    *,
    fetcher: Fetcher | None = None,
    progress_cb: ProgressCallback | None = None,
    now: datetime | None = None,
) -> BatchSummary:
    """Scrape every row of *input_path* and write one sorted JSON file.

    Config and input problems raise ``InputError`` before anything is
    fetched. A failed write raises ``OutputError`` once scraping is done.
    """
    cfg.validate()

    logger.info(f"Reading CSV from: {input_path}")
    targets = read_targets(input_path, skip_lines=cfg.skip_lines, limit=cfg.limit)
    out_path = build_output_path(cfg.output_dir, cfg.output_prefix, cfg.use_datetime_stamp, now=now)

    worker = ScrapeWorker(
        fetcher or DocumentFetcher(cfg.fetcher_config()),
        use_hint_title=cfg.use_hint_title,
    )
    logger.info(f"Processing {len(targets)} URLs with {cfg.workers} workers...")
    records = BoundedScheduler(worker.process, cfg.workers, progress_cb).run(targets)

    records = finalize(records)
    degraded = sum(1 for r in records if r.is_degraded)
    if degraded:
        logger.warning(f"{degraded}/{len(records)} items degraded to url/title only")

    write_batch(records, out_path)
    logger.info(f"Wrote {len(records)} rows to {out_path.resolve()}")
    return BatchSummary(output_path=out_path, total=len(records), degraded=degraded)
