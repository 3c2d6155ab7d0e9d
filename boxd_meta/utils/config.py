from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from boxd_meta.scraper.aggregator import default_file_mode
from boxd_meta.scraper.errors import InputError
from boxd_meta.scraper.fetcher import DEFAULT_USER_AGENT, FetcherConfig
from boxd_meta.utils.logger import logger


CONFIG_PATH = Path(os.environ.get("BOXD_META_CONFIG") or Path(__file__).resolve().parent.parent.parent / "config.json")


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass
class ScrapeConfig:
    # Max concurrent fetches
    workers: int = 8

    # Output: <output_dir>/<output_prefix>_<stamp>.json
    output_dir: str = "output"
    output_prefix: str = "movie_collection_meta"
    # YYYYMMDD_HHMM instead of YYYYMMDD
    use_datetime_stamp: bool = False

    # Input
    skip_lines: int = 4
    limit: int | None = None

    show_progress: bool = False

    # Take record titles from the input table instead of the page.
    use_hint_title: bool = False

    # Network & pacing
    request_timeout_sec: float = 10.0
    delay_min_sec: float = 0.25
    delay_max_sec: float = 0.75
    user_agent: str = DEFAULT_USER_AGENT
    # Example: http://127.0.0.1:7890
    proxy_url: str = ""

    def __post_init__(self) -> None:
        # Values from JSON or argv may arrive as strings; coerce what can be
        # coerced and leave the rest for validate() to reject.
        for name, cast in (("workers", int), ("skip_lines", int)):
            try:
                setattr(self, name, cast(getattr(self, name)))
            except (TypeError, ValueError):
                pass
        for name in ("request_timeout_sec", "delay_min_sec", "delay_max_sec"):
            try:
                setattr(self, name, float(getattr(self, name)))
            except (TypeError, ValueError):
                pass
        if self.limit in ("", None):
            self.limit = None
        else:
            try:
                self.limit = int(self.limit)
            except (TypeError, ValueError):
                pass
        for name in ("use_datetime_stamp", "show_progress", "use_hint_title"):
            setattr(self, name, _as_bool(getattr(self, name)))
        self.output_dir = str(self.output_dir or "").strip() or "output"
        self.output_prefix = str(self.output_prefix or "").strip() or "movie_collection_meta"
        self.user_agent = str(self.user_agent or "").strip() or DEFAULT_USER_AGENT
        self.proxy_url = str(self.proxy_url or "").strip()

    def validate(self) -> None:
        """Raise :class:`InputError` for a configuration a batch can't run with."""
        if not isinstance(self.workers, int) or self.workers < 1:
            raise InputError(f"workers must be a positive integer, got {self.workers!r}")
        if not isinstance(self.skip_lines, int) or self.skip_lines < 0:
            raise InputError(f"skip_lines must be >= 0, got {self.skip_lines!r}")
        if self.limit is not None and (not isinstance(self.limit, int) or self.limit < 0):
            raise InputError(f"limit must be >= 0, got {self.limit!r}")
        for name in ("request_timeout_sec", "delay_min_sec", "delay_max_sec"):
            if not isinstance(getattr(self, name), float):
                raise InputError(f"{name} must be a number, got {getattr(self, name)!r}")
        if self.request_timeout_sec <= 0:
            raise InputError(f"request_timeout_sec must be > 0, got {self.request_timeout_sec}")
        if self.delay_min_sec < 0 or self.delay_max_sec < self.delay_min_sec:
            raise InputError(
                f"politeness delay range is invalid: {self.delay_min_sec}..{self.delay_max_sec}"
            )

    def fetcher_config(self) -> FetcherConfig:
        return FetcherConfig(
            timeout_sec=self.request_timeout_sec,
            delay_min_sec=self.delay_min_sec,
            delay_max_sec=self.delay_max_sec,
            user_agent=self.user_agent,
            proxy_url=self.proxy_url,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {k: v for k, v in self.__dict__.items()}


def load_config(path: str | Path | None = None) -> ScrapeConfig:
    """Read config from JSON.

    The default ``CONFIG_PATH`` is optional: when it is missing or unreadable
    the defaults are used. A *path* passed explicitly must exist and hold a
    JSON object, otherwise ``InputError`` is raised.
    """
    explicit = path is not None
    p = Path(path).expanduser() if explicit else CONFIG_PATH
    if not p.exists():
        if explicit:
            raise InputError(f"config file not found: {p}")
        return ScrapeConfig()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        if explicit:
            raise InputError(f"cannot read config {p}: {e}") from e
        logger.warning(f"ignoring unreadable config {p}: {e}")
        return ScrapeConfig()
    if not isinstance(data, dict):
        if explicit:
            raise InputError(f"config {p} must hold a JSON object")
        logger.warning(f"ignoring config {p}: expected a JSON object")
        return ScrapeConfig()

    known = {f.name for f in fields(ScrapeConfig)}
    return ScrapeConfig(**{k: v for k, v in data.items() if k in known})


def save_config(cfg: ScrapeConfig, path: str | Path | None = None) -> None:
    p = Path(path) if path is not None else CONFIG_PATH
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(p.parent), prefix=f".{p.name}.", suffix=".tmp")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(json.dumps(cfg.to_dict(), ensure_ascii=False, indent=4))
    os.chmod(tmp, default_file_mode())
    os.replace(tmp, p)
