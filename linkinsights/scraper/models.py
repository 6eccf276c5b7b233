"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


class AuthMethod(str, Enum):
    COOKIE = "cookie"
    CREDENTIALS = "credentials"


class CookieOutcome(Enum):
    """Result of the cookie attempt: either done, or hand over to the login form."""

    AUTHENTICATED = "authenticated"
    NEEDS_FALLBACK = "needs_fallback"


@dataclass
class Session:
    """An authenticated browsing context, as far as later stages are concerned."""

    method: AuthMethod
    valid: bool = True

    def invalidate(self) -> None:
        """Mark the session unusable (a login redirect was observed)."""
        self.valid = False


@dataclass(frozen=True)
class AuthConfig:
    """Authentication material for one run.  Either part may be absent."""

    cookie: str | None = None
    email: str | None = None
    password: str | None = None

    @property
    def has_cookie(self) -> bool:
        return bool(self.cookie)

    @property
    def has_credentials(self) -> bool:
        """An email without a password (or vice versa) is not a usable credential."""
        return bool(self.email) and bool(self.password)


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and linear back-off for :func:`retry_async`."""

    max_attempts: int = 3
    base_delay: float = 1.0  # seconds

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be a positive integer")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed *attempt* (1-indexed) before the next one."""
        return self.base_delay * attempt


@dataclass(frozen=True)
class CookieCredential:
    name: str
    value: str

    def to_playwright(self, domain: str) -> dict[str, Any]:
        """Render as a cookie dict accepted by ``BrowserContext.add_cookies``."""
        return {
            "name": self.name,
            "value": self.value,
            "domain": domain,
            "path": "/",
            "httpOnly": False,
            "secure": True,
            "sameSite": "Lax",
        }


@dataclass(frozen=True)
class LinkRecord:
    """Click statistics for a single dashboard link."""

    title: str
    url: str
    clicks: int = 0

    def is_valid(self) -> bool:
        return bool(self.title) and bool(self.url)

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "url": self.url, "clicks": self.clicks}


@dataclass(frozen=True)
class ExtractionBatch:
    """Every record extracted in one run, paired with the run's date."""

    date_iso: str
    items: tuple[LinkRecord, ...] = field(default_factory=tuple)

    @classmethod
    def from_records(cls, date_iso: str, records: Iterable[LinkRecord]) -> ExtractionBatch:
        """Build a batch keeping only valid records, in their original order."""
        return cls(date_iso=date_iso, items=tuple(r for r in records if r.is_valid()))

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body expected by the ingestion webhook."""
        return {"dateISO": self.date_iso, "items": [r.to_dict() for r in self.items]}
