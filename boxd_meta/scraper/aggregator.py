from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterable

from .errors import OutputError
from .types import MediaRecord


DATE_STAMP = "%Y%m%d"
DATETIME_STAMP = "%Y%m%d_%H%M"


def finalize(records: Iterable[MediaRecord]) -> list[MediaRecord]:
    """Order records by title (plain string comparison, stable for ties)."""
    return sorted(records, key=lambda r: r.title)


def build_output_path(
    output_dir: str | Path,
    prefix: str,
    use_datetime_stamp: bool = False,
    now: datetime | None = None,
) -> Path:
    now = now or datetime.now()
    stamp = now.strftime(DATETIME_STAMP if use_datetime_stamp else DATE_STAMP)
    return Path(output_dir).expanduser() / f"{prefix}_{stamp}.json"


def default_file_mode() -> int:
    """Mode a plain open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def dump_records(records: Iterable[MediaRecord]) -> str:
    return json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=4)


def write_batch(records: Iterable[MediaRecord], path: str | Path) -> Path:
    """Sort *records* and write them to *path* as one JSON array.

    The file appears in a single step (temp file + replace), so a failed write
    never leaves a truncated result behind.
    """
    path = Path(path)
    payload = dump_records(finalize(records))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.chmod(tmp, default_file_mode())
            os.replace(tmp, path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise
    except OSError as e:
        raise OutputError(f"cannot write {path}: {e}") from e
    return path
