"""Link record extraction: turns a stabilised dashboard snapshot into records.

The dashboard markup is unstable, so every field is located through an ordered
list of selector probes; the first probe that yields something wins.  Cards
that cannot be parsed are logged and skipped, never fatal.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Page

from linkinsights.errors import ExtractionCardError
from linkinsights.scraper.models import LinkRecord

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Selector probes (highest priority first)
# ---------------------------------------------------------------------------
CARD_SELECTORS = (
    '[data-testid="link-card"]',
    ".link-card",
    '[class*="link-card"]',
)
CLICK_HINT_SELECTORS = (
    '[class*="click"]',
    '[class*="Click"]',
    '[data-testid*="click"]',
)
TITLE_SELECTORS = (
    'input[aria-label="Title"]',
    '[data-testid="link-title"]',
    "h3",
    "textarea",
    '[class*="title"]',
    '[class*="Title"]',
)
URL_SELECTOR = 'a[href^="http"]'

_CLICKS_TEXT = re.compile(r"\d+\s+clicks?")
_FIRST_DIGITS = re.compile(r"(\d+)")

_FORM_FIELDS = {"input", "textarea"}

# Serialises a clone of the live document with form values copied into the
# markup, since page.content() only reflects attributes.
_SNAPSHOT_JS = """
() => {
  const root = document.documentElement.cloneNode(true);
  const live = document.querySelectorAll('input, textarea');
  const copies = root.querySelectorAll('input, textarea');
  live.forEach((el, i) => {
    const copy = copies[i];
    if (!copy) return;
    if (el.tagName === 'TEXTAREA') copy.textContent = el.value;
    else copy.setAttribute('value', el.value);
  });
  return root.outerHTML;
}
"""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _find_cards(soup: BeautifulSoup) -> List[Tag]:
    """Return the matches of the first card selector that matches anything."""
    for selector in CARD_SELECTORS:
        cards = soup.select(selector)
        if cards:
            return cards
    return []


def _first_with_clicks(elements: Iterable[Tag]) -> Optional[Tag]:
    for el in elements:
        if _CLICKS_TEXT.search(el.get_text()):
            return el
    return None


def _extract_clicks(card: Tag) -> int:
    """Parse the first digit group of the "<n> clicks" element, or 0.

    Only contiguous digits are captured, so ``"1,234 clicks"`` parses as 1.
    """
    element = None
    for selector in CLICK_HINT_SELECTORS:
        element = _first_with_clicks(card.select(selector))
        if element is not None:
            break
    if element is None:
        element = _first_with_clicks(card.find_all(True))
    if element is None:
        return 0

    match = _FIRST_DIGITS.search(element.get_text())
    return int(match.group(1)) if match else 0


def _extract_title(card: Tag) -> str:
    for selector in TITLE_SELECTORS:
        element = card.select_one(selector)
        if element is None:
            continue
        if element.name in _FORM_FIELDS:
            value = element.get("value") if element.name == "input" else element.get_text()
            if value:
                return str(value).strip()
        return element.get_text().strip()
    return ""


def _extract_url(card: Tag) -> str:
    element = card.select_one(URL_SELECTOR)
    if element is None:
        return ""
    return str(element.get("href", "")).strip()


def _extract_card(card: Tag) -> LinkRecord:
    try:
        return LinkRecord(
            title=_extract_title(card),
            url=_extract_url(card),
            clicks=_extract_clicks(card),
        )
    except Exception as exc:
        raise ExtractionCardError(f"could not parse card: {exc}") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def snapshot_document(page: Page) -> str:
    """Return the rendered HTML of *page*, including live form-field values."""
    return await page.evaluate(_SNAPSHOT_JS)


def extract_links(html: str) -> List[LinkRecord]:
    """Extract one :class:`LinkRecord` per parseable card in *html*.

    Records with an empty title or URL are discarded.  Order follows the
    document, which is a rendering artefact rather than a ranking.
    """
    soup = BeautifulSoup(html, "html.parser")
    cards = _find_cards(soup)

    links: List[LinkRecord] = []
    for index, card in enumerate(cards):
        try:
            record = _extract_card(card)
        except ExtractionCardError as exc:
            logger.warning("Error extracting link data from card %d: %s", index, exc)
            continue
        if record.is_valid():
            links.append(record)

    logger.debug("Parsed %d of %d card(s)", len(links), len(cards))
    return links
