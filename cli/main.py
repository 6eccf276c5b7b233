"""Link Insights CLI — entry-point for the scheduled scrape.

Usage:
    python cli/main.py --help

Commands:
    run            → authenticate, load all links, extract, deliver to WEBHOOK_URL
    parse-cookies  → show which cookie names LT_COOKIE would inject
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from linkinsights.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import logging
from typing import Optional

import typer

from linkinsights.config import RunConfig, settings
from linkinsights.errors import LinkInsightsError

app = typer.Typer(
    name="linkinsights",
    help="Linktree click-count scraper.",
    no_args_is_help=True,
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Scrape run
# ---------------------------------------------------------------------------
@app.command("run")
def run(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Extract but print the payload instead of posting it."
    ),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window."),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default: LOG_LEVEL or INFO)."
    ),
) -> None:
    """Scrape the dashboard once and deliver the batch to the webhook."""
    from linkinsights.delivery.webhook import serialize_batch
    from linkinsights.pipeline import run_pipeline

    _configure_logging(log_level or settings.log_level)

    try:
        config = RunConfig.from_settings(
            require_webhook=not dry_run,
            headless=False if headed else None,
        )
        result = asyncio.run(run_pipeline(config, dry_run=dry_run))
    except LinkInsightsError as exc:
        typer.echo(f"[run] Scraping failed: {exc}", err=True)
        raise typer.Exit(1)
    except Exception as exc:
        typer.echo(f"[run] Fatal error: {exc!r}", err=True)
        raise typer.Exit(1)

    if dry_run:
        typer.echo(serialize_batch(result.batch))
        return
    typer.echo(
        f"[run] Delivered {len(result.batch.items)} link(s) for {result.batch.date_iso} "
        f"(auth={result.session.method.value})"
    )


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------
@app.command("parse-cookies")
def parse_cookies_cmd(
    cookie: Optional[str] = typer.Option(
        None, "--cookie", help="Raw Cookie header (default: LT_COOKIE)."
    ),
) -> None:
    """List the cookie names that would be injected.  Values are never printed."""
    from linkinsights.scraper.session import parse_cookies

    raw = cookie if cookie is not None else settings.lt_cookie
    if not raw:
        typer.echo("[parse-cookies] No cookie string given and LT_COOKIE is empty.")
        raise typer.Exit(1)

    cookies = parse_cookies(raw)
    typer.echo(f"[parse-cookies] {len(cookies)} usable cookie(s)")
    for c in cookies:
        typer.echo(f"  {c.name}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
