#!/usr/bin/env python3
"""
Crawler Data - Site Report
Prints every tracked site with its page count and crawl cycle
"""

import sys
import asyncio
from datetime import datetime, timezone
from typing import List

from config import SITE_PAGE_COUNT_MODE, LOG_LEVEL, LOG_DIR
from core.constants import PageCountMode
from core.models import SiteSummary
from core.utils import setup_logging, get_logger, format_datetime, time_formatter
from database.mongodb import CrawlerDatabase, db, close_db

logger = get_logger(__name__)


def format_site_table(sites: List[SiteSummary], now: datetime = None) -> str:
    """Render site summaries as a plain text table"""
    # pymongo returns naive UTC datetimes
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    header = f"{'SITE':<32} {'PAGES':>8} {'CYCLE':>6} {'FIRST':>6}  {'CYCLE AGE':<12} LAST UPDATED"
    lines = [header, "-" * len(header)]

    for site in sites:
        if site.cycle_start_time:
            age = time_formatter((now - site.cycle_start_time).total_seconds())
        else:
            age = "-"
        lines.append(
            f"{site.site_id:<32} {site.total_pages:>8} {site.current_cycle:>6} "
            f"{'yes' if site.is_first_cycle else 'no':>6}  {age:<12} "
            f"{format_datetime(site.last_updated)}"
        )

    total = sum(site.total_pages for site in sites)
    lines.append(f"{len(sites)} sites, {total} pages")
    return "\n".join(lines)


async def run_report(database: CrawlerDatabase, mode: PageCountMode) -> str:
    """Fetch site summaries and render them"""
    sites = await database.list_sites(mode)
    logger.info(f"📊 Loaded {len(sites)} sites ({mode.value} page counts)")
    return format_site_table(sites)


async def _main() -> None:
    try:
        print(await run_report(db, PageCountMode(SITE_PAGE_COUNT_MODE)))
    finally:
        await close_db()


def main():
    """Main entry point"""
    setup_logging(LOG_LEVEL, LOG_DIR)

    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        logger.info("👋 Received keyboard interrupt")
    except Exception as e:
        logger.critical(f"💥 Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
