"""
Logging setup
"""
import logging
import os
import sys
import threading


_item_ctx = threading.local()

# Log files live in logs/ under the project root
LOGS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "logs")
DEFAULT_LOG_FILE = os.path.join(LOGS_DIR, "boxd_meta.log")

# Log level mapping from string to logging constant
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level_from_env() -> int:
    """Get log level from environment variable BOXD_META_LOG_LEVEL or LOG_LEVEL."""
    level_str = os.environ.get("BOXD_META_LOG_LEVEL") or os.environ.get("LOG_LEVEL") or "INFO"
    return LOG_LEVEL_MAP.get(level_str.upper(), logging.INFO)


def set_item_context(item: str | None) -> None:
    """Tag log records emitted by the current thread with the item being scraped."""
    if item is None:
        clear_item_context()
        return
    _item_ctx.item = str(item)


def clear_item_context() -> None:
    if hasattr(_item_ctx, "item"):
        delattr(_item_ctx, "item")


class InjectItemFilter(logging.Filter):
    """Injects the current item (thread-local) into LogRecord, defaulting to '-'"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.item = getattr(_item_ctx, "item", "-")
        return True


def setup_logger(name="boxd_meta", level=None, log_file=None):
    """Configure and return the logger

    Args:
        name: Logger name
        level: Log level (if None, read from environment variable)
        log_file: Log file path (if None, use default in logs/ directory)
    """
    if level is None:
        level = get_log_level_from_env()

    if log_file is None:
        log_file = DEFAULT_LOG_FILE

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Every record carries an item tag; the formatter below depends on it.
    if not any(isinstance(f, InjectItemFilter) for f in logger.filters):
        logger.addFilter(InjectItemFilter())

    # Avoid adding handlers twice
    if logger.hasHandlers():
        return logger

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(item)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # File handler
    try:
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        # Read-only installs still get console logging.
        file_handler = None
    if file_handler is not None:
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def set_level(level: int | str) -> None:
    """Change the level of the package logger and all of its handlers."""
    if isinstance(level, str):
        level = LOG_LEVEL_MAP.get(level.upper(), logging.INFO)
    logger.setLevel(level)
    for h in logger.handlers:
        h.setLevel(level)


logger = setup_logger()
