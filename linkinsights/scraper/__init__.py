"""Scraper package — authentication, feed loading & link extraction."""

from linkinsights.scraper.convergence import load_all
from linkinsights.scraper.extractor import extract_links, snapshot_document
from linkinsights.scraper.models import (
    AuthConfig,
    AuthMethod,
    CookieCredential,
    CookieOutcome,
    ExtractionBatch,
    LinkRecord,
    RetryPolicy,
    Session,
)
from linkinsights.scraper.retry import retry_async
from linkinsights.scraper.session import parse_cookies, resolve_session

__all__ = [
    "retry_async",
    "resolve_session",
    "parse_cookies",
    "load_all",
    "snapshot_document",
    "extract_links",
    "AuthConfig",
    "AuthMethod",
    "CookieCredential",
    "CookieOutcome",
    "ExtractionBatch",
    "LinkRecord",
    "RetryPolicy",
    "Session",
]
