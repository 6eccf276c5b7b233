"""Session resolution: cookie restoration first, credential login as fallback.

The cookie attempt never raises for an expired or rejected cookie; it reports a
:class:`CookieOutcome` and :func:`resolve_session` decides whether the login
form is needed.  Only fully authenticated sessions are ever returned.
"""

from __future__ import annotations

import logging

from playwright.async_api import BrowserContext, Error as PlaywrightError, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from linkinsights.errors import (
    CookieAuthFailedNoFallback,
    LoginTimeout,
    NoAuthMethodAvailable,
    SessionExpired,
)
from linkinsights.scraper.models import (
    AuthConfig,
    AuthMethod,
    CookieCredential,
    CookieOutcome,
    RetryPolicy,
    Session,
)
from linkinsights.scraper.retry import retry_async

logger = logging.getLogger(__name__)

COOKIE_DOMAIN = ".linktr.ee"
DASHBOARD_URL = "https://linktr.ee/admin/links"
LOGIN_URL = "https://linktr.ee/login"

_AUTHENTICATED_URL_GLOB = "**/admin**"
_LOGIN_PATH_MARKER = "/login"

_EMAIL_SELECTOR = 'input[type="email"]'
_PASSWORD_SELECTOR = 'input[type="password"]'
_SUBMIT_SELECTOR = 'button[type="submit"]'


def parse_cookies(raw: str) -> list[CookieCredential]:
    """Split a raw ``Cookie`` header into name/value pairs.

    Segments are separated by ``;`` and split on the first ``=``.  Segments
    with no ``=``, an empty name or an empty value are dropped.
    """
    cookies: list[CookieCredential] = []
    for segment in raw.split(";"):
        name, sep, value = segment.strip().partition("=")
        name, value = name.strip(), value.strip()
        if sep and name and value:
            cookies.append(CookieCredential(name=name, value=value))
    return cookies


def is_login_url(url: str) -> bool:
    return _LOGIN_PATH_MARKER in url


async def try_cookie_auth(
    context: BrowserContext,
    page: Page,
    raw_cookie: str,
    *,
    domain: str = COOKIE_DOMAIN,
    dashboard_url: str = DASHBOARD_URL,
) -> CookieOutcome:
    """Seed *context* with cookies and check whether the dashboard accepts them."""
    cookies = parse_cookies(raw_cookie)
    if not cookies:
        logger.warning("Cookie string contained no usable name=value pairs")
        return CookieOutcome.NEEDS_FALLBACK

    logger.info("Injecting %d cookie(s) for %s", len(cookies), domain)
    try:
        await context.add_cookies([c.to_playwright(domain) for c in cookies])
        await page.goto(dashboard_url, wait_until="networkidle")
    except PlaywrightError as exc:
        logger.warning("Cookie authentication failed, falling back to login: %s", exc)
        return CookieOutcome.NEEDS_FALLBACK

    if is_login_url(page.url):
        logger.warning("Cookie authentication failed - redirected to %s", page.url)
        return CookieOutcome.NEEDS_FALLBACK

    logger.info("Cookie authentication successful")
    return CookieOutcome.AUTHENTICATED


async def login_with_credentials(
    page: Page,
    email: str,
    password: str,
    *,
    policy: RetryPolicy | None = None,
    login_url: str = LOGIN_URL,
    login_timeout: float = 10.0,
) -> None:
    """Submit the login form, retrying the whole sequence on any failure.

    Raises:
        LoginTimeout: If the authenticated area is never reached and all
            attempts are spent.
    """

    async def _attempt() -> None:
        await page.goto(login_url, wait_until="networkidle")
        await page.fill(_EMAIL_SELECTOR, email)
        await page.fill(_PASSWORD_SELECTOR, password)
        await page.click(_SUBMIT_SELECTOR)
        try:
            await page.wait_for_url(_AUTHENTICATED_URL_GLOB, timeout=login_timeout * 1000)
        except PlaywrightTimeoutError as exc:
            raise LoginTimeout(
                f"Login did not reach the dashboard within {login_timeout:.0f}s"
            ) from exc

    await retry_async(_attempt, policy, label="login")
    logger.info("Credential login successful")


async def resolve_session(
    context: BrowserContext,
    page: Page,
    auth: AuthConfig,
    *,
    policy: RetryPolicy | None = None,
    login_timeout: float = 10.0,
    domain: str = COOKIE_DOMAIN,
    dashboard_url: str = DASHBOARD_URL,
    login_url: str = LOGIN_URL,
) -> Session:
    """Authenticate *page* using the cookie if present, else the credential pair.

    Raises:
        NoAuthMethodAvailable: Neither cookie nor credentials were supplied.
        CookieAuthFailedNoFallback: The cookie was rejected and no credentials
            are available.
        LoginTimeout: The credential login failed on every attempt.
    """
    if not auth.has_cookie and not auth.has_credentials:
        raise NoAuthMethodAvailable("No authentication method available")

    if auth.has_cookie:
        logger.info("Using cookie authentication...")
        outcome = await try_cookie_auth(
            context, page, auth.cookie or "", domain=domain, dashboard_url=dashboard_url
        )
        if outcome is CookieOutcome.AUTHENTICATED:
            return Session(method=AuthMethod.COOKIE)
        if not auth.has_credentials:
            raise CookieAuthFailedNoFallback(
                "Cookie authentication failed and no login credentials available"
            )
    else:
        logger.info("Using email/password authentication...")

    await login_with_credentials(
        page,
        auth.email or "",
        auth.password or "",
        policy=policy,
        login_url=login_url,
        login_timeout=login_timeout,
    )
    return Session(method=AuthMethod.CREDENTIALS)


def check_session(page: Page, session: Session) -> None:
    """Invalidate *session* and abort if *page* has been bounced to the login form.

    Raises:
        SessionExpired: If the current URL is the login page.
    """
    if is_login_url(page.url):
        session.invalidate()
        raise SessionExpired(f"Session lost: redirected to {page.url}")
