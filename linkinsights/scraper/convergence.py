"""Scroll convergence: force the lazily-paginated link feed to render fully.

The dashboard appends cards as the viewport nears the bottom.  We keep
scrolling until ``document.body.scrollHeight`` stops growing.
"""

from __future__ import annotations

import logging

from playwright.async_api import Page

from linkinsights.errors import ConvergenceNotStable
from linkinsights.scraper.models import RetryPolicy
from linkinsights.scraper.retry import retry_async

logger = logging.getLogger(__name__)

_HEIGHT_JS = "() => document.body.scrollHeight"
_SCROLL_JS = "() => window.scrollTo(0, document.body.scrollHeight)"


async def _scroll_until_stable(
    page: Page, settle_seconds: float, max_iterations: int | None
) -> int:
    iterations = 0
    previous_height = 0
    current_height = await page.evaluate(_HEIGHT_JS)

    while current_height > previous_height:
        if max_iterations is not None and iterations >= max_iterations:
            raise ConvergenceNotStable(iterations, current_height)
        await page.evaluate(_SCROLL_JS)
        await page.wait_for_timeout(settle_seconds * 1000)
        iterations += 1
        previous_height = current_height
        current_height = await page.evaluate(_HEIGHT_JS)
        logger.debug("Scroll %d: height %d -> %d", iterations, previous_height, current_height)

    return iterations


async def load_all(
    page: Page,
    *,
    policy: RetryPolicy | None = None,
    settle_seconds: float = 2.0,
    max_iterations: int | None = None,
) -> int:
    """Scroll *page* to the bottom until its height stops growing.

    A failed measurement or scroll restarts the whole loop under
    :func:`retry_async`.  With *max_iterations* set, a page that is still
    growing after that many scrolls raises :class:`ConvergenceNotStable`;
    ``None`` leaves the loop unbounded.

    Returns the number of scroll iterations performed by the successful attempt.
    """
    logger.info("Loading all links...")
    iterations = await retry_async(
        lambda: _scroll_until_stable(page, settle_seconds, max_iterations),
        policy,
        label="load_all",
    )
    logger.info("Feed stabilised after %d scroll(s)", iterations)
    return iterations
