"""Shared fakes for the browser-facing stages.

``FakePage`` / ``FakeContext`` implement just the slice of the Playwright async
API the pipeline touches, scripted per test.  No browser is launched.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

DASHBOARD = "https://linktr.ee/admin/links"
LOGIN = "https://linktr.ee/login"


class FakeContext:
    def __init__(self) -> None:
        self.cookies: list[dict[str, Any]] = []

    async def add_cookies(self, cookies: list[dict[str, Any]]) -> None:
        self.cookies.extend(cookies)


class FakePage:
    """Scriptable stand-in for ``playwright.async_api.Page``.

    Args:
        cookie_valid: Whether navigating to the dashboard stays there (True)
            or is redirected to the login page (False).
        login_failures: How many login submissions time out before one succeeds.
        heights: Successive ``scrollHeight`` readings; the last one repeats.
        html: Document returned by the snapshot script.
    """

    def __init__(
        self,
        *,
        cookie_valid: bool = True,
        login_failures: int = 0,
        heights: list[int] | None = None,
        html: str = "<html><body></body></html>",
        goto_error: Exception | None = None,
    ) -> None:
        self.url = "about:blank"
        self.cookie_valid = cookie_valid
        self.login_failures = login_failures
        self.heights = list(heights or [100, 100])
        self.html = html
        self.goto_error = goto_error

        self.visited: list[str] = []
        self.filled: list[tuple[str, str]] = []
        self.clicked: list[str] = []
        self.scrolls = 0
        self.waits: list[float] = []
        self._height_index = 0
        self._submitted = False

    async def goto(self, url: str, wait_until: str | None = None) -> None:
        self.visited.append(url)
        if self.goto_error is not None:
            raise self.goto_error
        if url == DASHBOARD and not self.cookie_valid:
            self.url = LOGIN
        else:
            self.url = url

    async def fill(self, selector: str, value: str) -> None:
        self.filled.append((selector, value))

    async def click(self, selector: str) -> None:
        self.clicked.append(selector)
        self._submitted = True

    async def wait_for_url(self, pattern: str, timeout: float | None = None) -> None:
        if not self._submitted:
            raise PlaywrightTimeoutError("Timeout waiting for URL")
        self._submitted = False
        if self.login_failures > 0:
            self.login_failures -= 1
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        self.url = "https://linktr.ee/admin"

    async def wait_for_timeout(self, ms: float) -> None:
        self.waits.append(ms)

    async def evaluate(self, script: str) -> Any:
        if "outerHTML" in script:
            return self.html
        if "scrollTo" in script:
            self.scrolls += 1
            return None
        if "scrollHeight" in script:
            height = self.heights[min(self._height_index, len(self.heights) - 1)]
            self._height_index += 1
            return height
        raise PlaywrightError(f"unexpected script: {script}")


def make_browser_factory(page: FakePage, context: FakeContext | None = None):
    """Return an ``open_browser`` replacement that records its lifecycle."""
    context = context or FakeContext()
    state = SimpleNamespace(opened=0, closed=0, kwargs=None, context=context, page=page)

    @asynccontextmanager
    async def factory(**kwargs: Any):
        state.opened += 1
        state.kwargs = kwargs
        try:
            yield SimpleNamespace(context=context, page=page)
        finally:
            state.closed += 1

    factory.state = state  # type: ignore[attr-defined]
    return factory


@pytest.fixture()
def fake_context() -> FakeContext:
    return FakeContext()


@pytest.fixture()
def make_page():
    """Factory fixture: ``make_page(cookie_valid=False, heights=[...])``."""
    return FakePage


@pytest.fixture()
def make_browser():
    """Factory fixture: ``make_browser(page)`` -> fake ``open_browser``."""
    return make_browser_factory
