"""Tests for the scraper data models."""

from __future__ import annotations

import pytest

from linkinsights.scraper.models import (
    AuthConfig,
    CookieCredential,
    ExtractionBatch,
    LinkRecord,
    RetryPolicy,
    Session,
    AuthMethod,
)


class TestRetryPolicy:
    def test_defaults(self) -> None:
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.base_delay == 1.0

    def test_delay_is_linear_in_attempt(self) -> None:
        policy = RetryPolicy(base_delay=0.5)
        assert [policy.delay_for(k) for k in (1, 2, 3)] == [0.5, 1.0, 1.5]

    @pytest.mark.parametrize("attempts", [0, -1])
    def test_rejects_non_positive_attempts(self, attempts: int) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=attempts)

    def test_rejects_negative_delay(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(base_delay=-1)


class TestLinkRecord:
    def test_valid_requires_title_and_url(self) -> None:
        assert LinkRecord("Shop", "https://shop.example").is_valid()
        assert not LinkRecord("", "https://shop.example").is_valid()
        assert not LinkRecord("Shop", "").is_valid()

    def test_clicks_default_to_zero(self) -> None:
        assert LinkRecord("Shop", "https://shop.example").clicks == 0


class TestExtractionBatch:
    def test_from_records_filters_invalid_and_keeps_order(self) -> None:
        records = [
            LinkRecord("B", "https://b.example", 2),
            LinkRecord("", "https://nameless.example", 9),
            LinkRecord("A", "https://a.example", 1),
            LinkRecord("No URL", "", 3),
        ]
        batch = ExtractionBatch.from_records("2024-05-01", records)

        assert [r.title for r in batch.items] == ["B", "A"]

    def test_payload_matches_wire_contract(self) -> None:
        batch = ExtractionBatch.from_records(
            "2024-05-01", [LinkRecord("ショップ", "https://shop.example", 7)]
        )
        assert batch.to_payload() == {
            "dateISO": "2024-05-01",
            "items": [{"title": "ショップ", "url": "https://shop.example", "clicks": 7}],
        }

    def test_batch_is_immutable(self) -> None:
        batch = ExtractionBatch("2024-05-01")
        with pytest.raises(AttributeError):
            batch.date_iso = "2024-05-02"  # type: ignore[misc]


class TestCookieCredential:
    def test_to_playwright_shape(self) -> None:
        cookie = CookieCredential("sid", "abc").to_playwright(".linktr.ee")
        assert cookie == {
            "name": "sid",
            "value": "abc",
            "domain": ".linktr.ee",
            "path": "/",
            "httpOnly": False,
            "secure": True,
            "sameSite": "Lax",
        }


class TestAuthAndSession:
    def test_half_a_credential_pair_is_not_usable(self) -> None:
        assert not AuthConfig(email="me@example.com").has_credentials
        assert not AuthConfig(password="pw").has_credentials
        assert AuthConfig(email="me@example.com", password="pw").has_credentials

    def test_invalidate(self) -> None:
        session = Session(method=AuthMethod.COOKIE)
        assert session.valid
        session.invalidate()
        assert not session.valid
