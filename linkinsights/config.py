"""Centralised settings for the Link Insights scraper.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The pipeline itself never reads :data:`settings`; the entrypoint turns it into
a frozen :class:`RunConfig` via :meth:`RunConfig.from_settings`, which is where
presence/absence of secrets is validated.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from linkinsights.errors import ConfigError, NoAuthMethodAvailable
from linkinsights.scraper.models import AuthConfig, RetryPolicy

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    lt_cookie: str = field(default_factory=lambda: os.environ.get("LT_COOKIE", ""))
    linktree_email: str = field(
        default_factory=lambda: os.environ.get("LINKTREE_EMAIL", "")
    )
    linktree_password: str = field(
        default_factory=lambda: os.environ.get("LINKTREE_PASSWORD", "")
    )

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------
    webhook_url: str = field(default_factory=lambda: os.environ.get("WEBHOOK_URL", ""))
    webhook_timeout: float = field(
        default_factory=lambda: float(os.environ.get("WEBHOOK_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Retry / timing
    # ------------------------------------------------------------------
    retry_max_attempts: int = field(
        default_factory=lambda: int(os.environ.get("RETRY_MAX_ATTEMPTS", "3"))
    )
    retry_base_delay: float = field(
        default_factory=lambda: float(os.environ.get("RETRY_BASE_DELAY", "1.0"))
    )
    login_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LOGIN_TIMEOUT", "10.0"))
    )
    scroll_settle_seconds: float = field(
        default_factory=lambda: float(os.environ.get("SCROLL_SETTLE_SECONDS", "2.0"))
    )
    # 0 disables the cap
    scroll_max_iterations: int = field(
        default_factory=lambda: int(os.environ.get("SCROLL_MAX_ITERATIONS", "200"))
    )

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------
    headless: bool = field(default_factory=lambda: _env_bool("HEADLESS", "true"))
    user_agent: str = field(
        default_factory=lambda: os.environ.get("USER_AGENT", _DEFAULT_USER_AGENT)
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))


# Module-level singleton — import this everywhere:
#   from linkinsights.config import settings
settings = Settings()


@dataclass(frozen=True)
class RunConfig:
    """Explicit, validated configuration handed to :func:`run_pipeline`."""

    auth: AuthConfig
    webhook_url: str
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    login_timeout: float = 10.0
    scroll_settle_seconds: float = 2.0
    scroll_max_iterations: int | None = 200
    webhook_timeout: float = 30.0
    headless: bool = True
    user_agent: str = _DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not (self.auth.has_cookie or self.auth.has_credentials):
            raise NoAuthMethodAvailable(
                "No authentication method available: set LT_COOKIE or "
                "LINKTREE_EMAIL and LINKTREE_PASSWORD"
            )

    @classmethod
    def from_settings(
        cls,
        source: Settings | None = None,
        *,
        require_webhook: bool = True,
        headless: bool | None = None,
    ) -> RunConfig:
        """Build a :class:`RunConfig` from *source* (defaults to :data:`settings`).

        Raises:
            ConfigError: If ``WEBHOOK_URL`` is missing and *require_webhook* is set.
            NoAuthMethodAvailable: If neither a cookie nor a credential pair is set.
        """
        s = source or settings
        webhook_url = s.webhook_url.strip()
        if require_webhook and not webhook_url:
            raise ConfigError("Missing required environment variable: WEBHOOK_URL")

        auth = AuthConfig(
            cookie=s.lt_cookie.strip() or None,
            email=s.linktree_email.strip() or None,
            password=s.linktree_password or None,
        )
        return cls(
            auth=auth,
            webhook_url=webhook_url,
            retry_policy=RetryPolicy(
                max_attempts=s.retry_max_attempts,
                base_delay=s.retry_base_delay,
            ),
            login_timeout=s.login_timeout,
            scroll_settle_seconds=s.scroll_settle_seconds,
            scroll_max_iterations=s.scroll_max_iterations or None,
            webhook_timeout=s.webhook_timeout,
            headless=s.headless if headless is None else headless,
            user_agent=s.user_agent,
        )
