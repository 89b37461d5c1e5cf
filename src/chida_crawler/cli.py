"""CLI entry point and main crawl flow."""

import argparse
import logging
import sys
import time
from pathlib import Path

from chida_crawler.config import load_settings
from chida_crawler.inserter import insert_batch
from chida_crawler.models import BatchReport
from chida_crawler.scraper import list_tournaments
from chida_crawler.store import SupabaseStore
from chida_crawler.util import ChidaError

logger = logging.getLogger("chida_crawler")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chida-crawl",
        description="Crawl KATO open tournaments and import them as drafts.",
    )
    parser.add_argument(
        "--dry-run", action="store_true", default=False,
        help="Crawl and report only, without touching the store",
    )
    parser.add_argument(
        "--raw-cache", choices=["on", "off"], default="off",
        help="HTML cache mode (default: off)",
    )
    parser.add_argument(
        "--cache-dir", type=Path, default=Path("data") / "raw",
        help="HTML cache directory (default: data/raw)",
    )
    parser.add_argument(
        "--log-level", choices=["INFO", "DEBUG"], default="INFO",
        help="Logging level (default: INFO)",
    )
    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


def _log_report(report: BatchReport) -> None:
    logger.info("=== Summary ===")
    logger.info("Total: %d", report.total)
    logger.info("Success: %d", report.success)
    logger.info("Skipped (duplicate): %d", report.skipped)
    logger.info("Failed: %d", report.failed)
    if report.failed:
        logger.info("Failures:")
        for r in report.results:
            if not r.success and not r.duplicate:
                logger.info("  - %s: %s", r.title, r.message)


def run_crawler(
    dry_run: bool = False,
    use_cache: bool = False,
    cache_dir: Path | None = None,
) -> BatchReport | None:
    """Crawl once and insert everything found.

    Returns None on a dry run or when nothing was crawled.
    """
    settings = None if dry_run else load_settings()

    tournaments = list_tournaments(use_cache=use_cache, cache_dir=cache_dir)
    if not tournaments:
        logger.warning("No tournaments crawled")
        return None

    if settings is None:
        for t in tournaments:
            logger.info(
                "[dry-run] %s | %s | %s | %d divisions",
                t.title, t.location_city, t.earliest_date, len(t.divisions),
            )
        return None

    with SupabaseStore(settings.supabase_url, settings.service_key) as store:
        report = insert_batch(store, tournaments)
    _log_report(report)
    return report


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    _setup_logging(args.log_level)

    use_cache = args.raw_cache == "on"
    logger.info("Starting chida crawler")
    logger.info("Options: dry_run=%s cache=%s", args.dry_run, use_cache)

    start_time = time.time()

    try:
        run_crawler(
            dry_run=args.dry_run,
            use_cache=use_cache,
            cache_dir=args.cache_dir if use_cache else None,
        )
    except ChidaError as e:
        logger.error("Fatal error: %s", e)
        sys.exit(1)
    except Exception as e:
        logger.error("Unexpected error: %s", e, exc_info=True)
        sys.exit(1)

    logger.info("Elapsed: %.1fs", time.time() - start_time)
