"""
boxd-meta CLI - scrape film metadata for every URL in a CSV export
"""
import argparse
import json
import sys
from pathlib import Path

from tqdm import tqdm

from boxd_meta.scraper.errors import InputError, OutputError
from boxd_meta.scraper.extractor import extract_metadata
from boxd_meta.scraper.fetcher import parse_document
from boxd_meta.scraper.runner import run_batch
from boxd_meta.utils.config import ScrapeConfig, load_config
from boxd_meta.utils.logger import logger, set_level


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INPUT = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boxd-meta",
        description="Scrape Letterboxd film pages listed in a CSV into one JSON file.",
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        type=str,
        help="CSV with a 'URL' column (e.g. data/movie_collection_20251110.csv)",
    )
    source.add_argument(
        "--html",
        type=str,
        help="Extract from a saved film page instead and print the record (no network)",
    )

    parser.add_argument("--url", type=str, default="", help="URL to record for --html (default: file URI)")
    parser.add_argument("--config", type=str, default=None, help="JSON config file")
    parser.add_argument("--skip", type=int, default=None, help="Header lines to skip in the CSV (default: 4)")
    parser.add_argument("--workers", type=int, default=None, help="Parallel workers (default: 8)")
    parser.add_argument("--outdir", type=str, default=None, help="Output directory (default: output)")
    parser.add_argument("--prefix", type=str, default=None, help="Output filename prefix (default: movie_collection_meta)")
    parser.add_argument(
        "--datetime",
        action="store_true",
        default=None,
        help="Stamp output with YYYYMMDD_HHMM instead of YYYYMMDD",
    )
    parser.add_argument("--limit", type=int, default=None, help="Only process the first N rows")
    parser.add_argument("--progress", action="store_true", default=None, help="Show a progress bar")
    parser.add_argument(
        "--use-hint-title",
        action="store_true",
        default=None,
        help="Use the CSV Name/Title column as the record title",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: 10)")
    parser.add_argument("--proxy", type=str, default=None, help="Proxy URL, e.g. http://127.0.0.1:7890")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose (DEBUG) logging")
    return parser


_OVERRIDES = {
    "skip": "skip_lines",
    "workers": "workers",
    "outdir": "output_dir",
    "prefix": "output_prefix",
    "datetime": "use_datetime_stamp",
    "limit": "limit",
    "progress": "show_progress",
    "use_hint_title": "use_hint_title",
    "timeout": "request_timeout_sec",
    "proxy": "proxy_url",
}


def resolve_config(args: argparse.Namespace) -> ScrapeConfig:
    """Config file values, overridden by any flag given on the command line."""
    data = load_config(args.config).to_dict()
    for arg_name, field_name in _OVERRIDES.items():
        value = getattr(args, arg_name, None)
        if value is not None:
            data[field_name] = value
    return ScrapeConfig(**data)


def _inspect_html(path: str, url: str) -> int:
    p = Path(path).expanduser()
    try:
        html = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"cannot read {p}: {e}")
        return EXIT_INPUT
    doc = parse_document(html, url or p.resolve().as_uri())
    record = extract_metadata(doc, doc.url)
    print(json.dumps(record.to_dict(), ensure_ascii=False, indent=4))
    return EXIT_OK


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        set_level("DEBUG")

    if args.html:
        return _inspect_html(args.html, args.url)

    try:
        cfg = resolve_config(args)
    except InputError as e:
        logger.error(f"Input error: {e}")
        return EXIT_INPUT

    bar = None
    progress_cb = None
    if cfg.show_progress:
        bar = tqdm(total=0, desc="Scraping movies", ascii=True, ncols=120)

        def progress_cb(completed: int, total: int, label: str) -> None:
            bar.total = total
            bar.set_postfix_str(label, refresh=False)
            bar.update(1)

    try:
        summary = run_batch(cfg, args.input, progress_cb=progress_cb)
    except InputError as e:
        logger.error(f"Input error: {e}")
        return EXIT_INPUT
    except OutputError as e:
        logger.error(f"Output error: {e}")
        return EXIT_FAILED
    except KeyboardInterrupt:
        logger.info("Scrape interrupted by user")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=True)
        return EXIT_FAILED
    finally:
        if bar is not None:
            bar.close()

    print(f"Wrote {summary.total} rows to {summary.output_path.resolve()}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
