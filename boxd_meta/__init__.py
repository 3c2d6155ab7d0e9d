"""boxd-meta: bounded-concurrency film metadata scraper."""

__version__ = "0.2.1"
