"""
Network fetching - one polite GET per film page
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass

from bs4 import BeautifulSoup
from curl_cffi import requests
from curl_cffi.requests.exceptions import RequestException, Timeout

from boxd_meta.utils.logger import logger
from .errors import FetchError, FetchErrorKind
from .types import FetchedDocument


DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"


def build_proxies(proxy_url: str | None) -> dict[str, str] | None:
    pu = (proxy_url or "").strip()
    if not pu:
        return None
    return {"http": pu, "https": pu}


def parse_document(html: str, url: str, *, status_code: int = 200, final_url: str | None = None) -> FetchedDocument:
    return FetchedDocument(
        url=url,
        soup=BeautifulSoup(html, "html.parser"),
        status_code=status_code,
        final_url=final_url,
    )


@dataclass
class FetcherConfig:
    timeout_sec: float = 10.0
    delay_min_sec: float = 0.25
    delay_max_sec: float = 0.75
    user_agent: str = DEFAULT_USER_AGENT
    proxy_url: str = ""


class DocumentFetcher:
    """Fetch and parse a single page.

    A random pause precedes every request so a pool of workers doesn't hit
    the site in bursts. There are no retries here; a failed fetch raises
    :class:`FetchError` and the caller decides what to do with it.
    """

    def __init__(self, cfg: FetcherConfig | None = None):
        self.cfg = cfg or FetcherConfig()

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self.cfg.user_agent or DEFAULT_USER_AGENT}

    def _apply_delay(self) -> None:
        lo = max(0.0, float(self.cfg.delay_min_sec))
        hi = max(lo, float(self.cfg.delay_max_sec))
        if hi > 0:
            time.sleep(random.uniform(lo, hi))

    def fetch(self, url: str) -> FetchedDocument:
        self._apply_delay()
        logger.debug(f"GET {url}")
        try:
            r = requests.get(
                url,
                headers=self._headers(),
                timeout=self.cfg.timeout_sec,
                impersonate="chrome",
                proxies=build_proxies(self.cfg.proxy_url),
            )
        except Timeout as e:
            raise FetchError(url, FetchErrorKind.TIMEOUT, str(e)) from e
        except RequestException as e:
            raise FetchError(url, FetchErrorKind.NETWORK, str(e)) from e

        logger.debug(f"<- {r.status_code} {url}")
        if r.status_code != 200:
            raise FetchError(url, FetchErrorKind.HTTP_STATUS, status_code=r.status_code)
        return parse_document(r.text, url, status_code=r.status_code, final_url=str(getattr(r, "url", "") or url))
