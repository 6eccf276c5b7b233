"""Browser lifecycle: one Chromium, one context, one page per run."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from playwright.async_api import BrowserContext, Page, async_playwright

logger = logging.getLogger(__name__)


@dataclass
class BrowserHandle:
    context: BrowserContext
    page: Page


@asynccontextmanager
async def open_browser(
    *, headless: bool = True, user_agent: str | None = None
) -> AsyncIterator[BrowserHandle]:
    """Launch Chromium and yield a fresh context/page pair.

    The browser is closed on every exit path, including errors raised by the
    body of the ``async with`` block.

    Playwright needs a browser install (``playwright install chromium``).
    """
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless)
        try:
            context = await browser.new_context(user_agent=user_agent)
            page = await context.new_page()
            logger.info("Browser started (headless=%s)", headless)
            yield BrowserHandle(context=context, page=page)
        finally:
            await browser.close()
            logger.info("Browser closed")
