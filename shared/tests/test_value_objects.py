"""Tests for Money and DateRange."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange, Money


def test_money_multiplication_rounds_to_cents() -> None:
    assert (Money(Decimal("3333.33")) * Decimal("0.10")).amount == Decimal("333.33")
    assert (Money(Decimal("0.05")) * Decimal("0.50")).amount == Decimal("0.03")


def test_money_rejects_negative_amounts() -> None:
    with pytest.raises(ValidationError):
        Money(Decimal("-1"))


def test_money_rejects_mixed_currencies() -> None:
    with pytest.raises(ValueError):
        Money(Decimal("1"), "PHP") + Money(Decimal("1"), "USD")


def test_zero_money_is_falsy() -> None:
    assert not Money.zero()
    assert Money(Decimal("0.01"))


def test_reversed_range_is_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        DateRange(date(2025, 3, 5), date(2025, 3, 1))
    assert excinfo.value.field == "check_out"


def test_turnover_day_counts_as_overlap() -> None:
    first = DateRange(date(2025, 3, 25), date(2025, 3, 28))

    assert first.overlaps_with(DateRange(date(2025, 3, 27), date(2025, 3, 30)))
    assert first.overlaps_with(DateRange(date(2025, 3, 28), date(2025, 3, 31)))
    assert not first.overlaps_with(DateRange(date(2025, 3, 29), date(2025, 3, 31)))


def test_range_length_counts_both_ends() -> None:
    assert len(DateRange(date(2025, 3, 1), date(2025, 3, 1))) == 1
    assert len(DateRange(date(2025, 3, 1), date(2025, 3, 3))) == 3


def test_range_accepts_iso_strings() -> None:
    dates = DateRange("2025-03-01", "2025-03-02T10:00:00Z")
    assert dates.days() == [date(2025, 3, 1), date(2025, 3, 2)]
