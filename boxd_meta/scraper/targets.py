from __future__ import annotations

import csv
from itertools import islice
from pathlib import Path

from .errors import InputError
from .types import ScrapeTarget


URL_COLUMN = "URL"
# First column present wins.
TITLE_COLUMNS = ("Name", "Title")

# Letterboxd list exports open with a few lines of list metadata before the
# film table's header row.
DEFAULT_SKIP_LINES = 4


def read_targets(
    path: str | Path,
    skip_lines: int = DEFAULT_SKIP_LINES,
    limit: int | None = None,
) -> list[ScrapeTarget]:
    """Read ``(URL, title hint)`` pairs from a CSV file.

    Raises:
        InputError: the file is missing or unreadable, has no ``URL`` column,
            or a row has no URL.
    """
    if skip_lines < 0:
        raise InputError(f"skip_lines must be >= 0, got {skip_lines}")
    if limit is not None and limit < 0:
        raise InputError(f"limit must be >= 0, got {limit}")

    p = Path(path).expanduser()
    if not p.is_file():
        raise InputError(f"input file not found: {p}")

    try:
        with p.open("r", encoding="utf-8-sig", newline="") as f:
            for _ in range(skip_lines):
                f.readline()
            reader = csv.DictReader(f)
            columns = [c.strip() for c in (reader.fieldnames or [])]
            reader.fieldnames = columns
            if URL_COLUMN not in columns:
                raise InputError(f"input CSV must contain a column named '{URL_COLUMN}' (found: {columns})")
            title_col = next((c for c in TITLE_COLUMNS if c in columns), None)

            rows = reader if limit is None else islice(reader, limit)
            targets: list[ScrapeTarget] = []
            for line_no, row in enumerate(rows, start=1):
                url = (row.get(URL_COLUMN) or "").strip()
                if not url:
                    raise InputError(f"row {line_no} has an empty '{URL_COLUMN}' value")
                hint = (row.get(title_col) or "").strip() if title_col else ""
                targets.append(ScrapeTarget(source_url=url, hint_title=hint))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise InputError(f"cannot read {p}: {e}") from e
    return targets
