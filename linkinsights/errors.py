"""Exception taxonomy for the scraper pipeline.

Authentication and delivery errors are fatal and reach the CLI, which turns
them into a non-zero exit status.  :class:`ExtractionCardError` never leaves
the extractor: a failing card is logged and dropped.
"""

from __future__ import annotations


class LinkInsightsError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(LinkInsightsError):
    """Required configuration is missing or malformed."""


class NoAuthMethodAvailable(LinkInsightsError):
    """Neither cookie material nor a credential pair can authenticate the run."""


class CookieAuthFailedNoFallback(NoAuthMethodAvailable):
    """The cookie was rejected (login redirect) and no credentials are configured."""


class LoginTimeout(LinkInsightsError):
    """The credential login never reached the authenticated area in time."""


class ConvergenceNotStable(LinkInsightsError):
    """The page kept growing past the configured scroll-iteration cap."""

    def __init__(self, iterations: int, height: int) -> None:
        super().__init__(
            f"Page height still growing after {iterations} scroll iterations "
            f"(last height {height}px)"
        )
        self.iterations = iterations
        self.height = height


class WebhookDeliveryFailed(LinkInsightsError):
    """The ingestion endpoint answered with a non-2xx status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Webhook failed: {status} {body}")
        self.status = status
        self.body = body


class ExtractionCardError(LinkInsightsError):
    """A single card could not be parsed.  Always recovered locally."""


class SessionExpired(LinkInsightsError):
    """A login redirect was observed after the session had been established."""
