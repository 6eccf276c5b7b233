"""Delivery package — hands the extracted batch to the ingestion webhook."""

from linkinsights.delivery.webhook import deliver, serialize_batch

__all__ = ["deliver", "serialize_batch"]
