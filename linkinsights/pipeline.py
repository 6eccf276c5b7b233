"""Run entrypoint: authenticate, load the feed, extract, deliver.

Stages run strictly one after another on a single browser page.  The browser
is released on every exit path; nothing reaches the webhook unless every
earlier stage succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from linkinsights.config import RunConfig
from linkinsights.delivery.webhook import deliver
from linkinsights.scraper.browser import open_browser
from linkinsights.scraper.convergence import load_all
from linkinsights.scraper.extractor import extract_links, snapshot_document
from linkinsights.scraper.models import ExtractionBatch, Session
from linkinsights.scraper.session import check_session, resolve_session

logger = logging.getLogger(__name__)

# Japan Standard Time; no DST, so a fixed offset is exact.
JST = timezone(timedelta(hours=9), name="JST")


def today_iso(now: Optional[datetime] = None) -> str:
    """Return the current calendar date in JST as ``YYYY-MM-DD``.

    *now* may be naive (taken as UTC) or aware in any zone.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(JST).strftime("%Y-%m-%d")


@dataclass
class PipelineResult:
    batch: ExtractionBatch
    session: Session
    acknowledgement: str | None = None  # None when delivery was skipped


async def run_pipeline(
    config: RunConfig,
    *,
    dry_run: bool = False,
    browser_factory: Callable[..., Any] = open_browser,
    now: Optional[datetime] = None,
) -> PipelineResult:
    """Execute one full scrape and, unless *dry_run*, deliver the batch.

    *browser_factory* must return an async context manager yielding an object
    with ``context`` and ``page`` attributes (see :func:`open_browser`).
    """
    logger.info("Starting Linktree insights scraper...")
    date_iso = today_iso(now)
    logger.info("Today: %s", date_iso)

    async with browser_factory(headless=config.headless, user_agent=config.user_agent) as handle:
        session = await resolve_session(
            handle.context,
            handle.page,
            config.auth,
            policy=config.retry_policy,
            login_timeout=config.login_timeout,
        )
        await load_all(
            handle.page,
            policy=config.retry_policy,
            settle_seconds=config.scroll_settle_seconds,
            max_iterations=config.scroll_max_iterations,
        )
        check_session(handle.page, session)

        logger.info("Extracting link data...")
        html = await snapshot_document(handle.page)

    batch = ExtractionBatch.from_records(date_iso, extract_links(html))
    logger.info("Extracted %d links", len(batch.items))

    if dry_run:
        logger.info("Dry run: skipping webhook delivery")
        return PipelineResult(batch=batch, session=session)

    ack = await deliver(batch, config.webhook_url, timeout=config.webhook_timeout)
    logger.info("Scraping completed successfully")
    return PipelineResult(batch=batch, session=session, acknowledgement=ack)
