"""Webhook delivery: POST the extracted batch to the ingestion endpoint."""

from __future__ import annotations

import json
import logging

import httpx

from linkinsights.errors import WebhookDeliveryFailed
from linkinsights.scraper.models import ExtractionBatch

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


def serialize_batch(batch: ExtractionBatch) -> str:
    """Return the JSON wire form of *batch* (non-ASCII titles kept as-is)."""
    return json.dumps(batch.to_payload(), ensure_ascii=False)


async def deliver(batch: ExtractionBatch, endpoint: str, *, timeout: float = 30.0) -> str:
    """Send *batch* to *endpoint* exactly once and return the response body.

    The body is read as text whatever the status.  No retry is attempted.

    Raises:
        WebhookDeliveryFailed: If the endpoint answers with a non-2xx status.
        httpx.HTTPError: On transport failures (connection refused, timeout...).
    """
    async with httpx.AsyncClient(timeout=timeout) as client:
        response = await client.post(
            endpoint,
            content=serialize_batch(batch).encode("utf-8"),
            headers=_JSON_HEADERS,
        )

    body = response.text
    logger.info("Webhook status: %d %s", response.status_code, body)

    if not response.is_success:
        raise WebhookDeliveryFailed(response.status_code, body)
    return body
