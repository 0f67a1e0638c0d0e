"""Tests for cancellation terms and refund percentages."""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from apps.bookings.domain import policies


@pytest.mark.parametrize(
    "days_before, expected",
    [
        (30, Decimal("1.00")),
        (7, Decimal("1.00")),
        (6.99, Decimal("0.50")),
        (3, Decimal("0.50")),
        (2.99, Decimal("0.00")),
        (0, Decimal("0.00")),
        (-1, Decimal("0.00")),
    ],
)
def test_guest_refund_tiers(days_before, expected) -> None:
    assert policies.refund_percentage(days_before, by_guest=True) == expected


@pytest.mark.parametrize("days_before", [30, 5, 1, -2])
def test_host_and_admin_always_refund_in_full(days_before) -> None:
    assert policies.refund_percentage(days_before, by_guest=False) == policies.FULL_REFUND


def test_refund_never_grows_as_check_in_approaches() -> None:
    rng = random.Random(20250301)
    samples = sorted(rng.uniform(-5, 40) for _ in range(500))

    refunds = [policies.refund_percentage(days, by_guest=True) for days in samples]

    assert all(earlier <= later for earlier, later in zip(refunds, refunds[1:]))


def test_days_until_check_in_counts_from_utc_midnight() -> None:
    now = datetime(2025, 3, 17, 12, 0, tzinfo=timezone.utc)

    assert policies.days_until_check_in(date(2025, 3, 20), now) == 2.5


def test_cancellation_terms() -> None:
    now = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    assert policies.cancellation_terms(date(2025, 3, 10), now) == (True, date(2025, 3, 9))
    assert policies.cancellation_terms(date(2025, 3, 2), now) == (False, None)
    # exactly 24h of notice is not enough
    assert policies.cancellation_terms(date(2025, 3, 2), now - timedelta(hours=12)) == (False, None)
