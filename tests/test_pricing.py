"""Pure money helpers."""
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pytest

from dealership.services.pricing import (
    SKIP_PRICE_INVALID,
    SKIP_QUANTITY_INVALID,
    SKIP_QUANTITY_MISSING,
    SKIP_QUANTITY_NOT_POSITIVE,
    apply_promotions,
    discount_percent,
    is_promotion_active,
    line_amount,
    monthly_payment,
    parse_quantity,
    strict_total,
)

TODAY = date(2025, 6, 15)


@dataclass
class Promo:
    id: int
    discount_rate: Optional[str]
    start_date: Optional[str] = "2025-01-01"
    end_date: Optional[str] = "2025-12-31"
    description: str = "promo"


def test_parse_quantity():
    assert parse_quantity("3") == 3
    assert parse_quantity(" 12 ") == 12
    assert parse_quantity("-1") == -1
    assert parse_quantity("2.5") is None
    assert parse_quantity("abc") is None
    assert parse_quantity(None) is None


@pytest.mark.parametrize("quantity,price,reason", [
    (None, 100.0, SKIP_QUANTITY_MISSING),
    ("  ", 100.0, SKIP_QUANTITY_MISSING),
    ("x", 100.0, SKIP_QUANTITY_INVALID),
    ("0", 100.0, SKIP_QUANTITY_NOT_POSITIVE),
    ("-2", 100.0, SKIP_QUANTITY_NOT_POSITIVE),
    ("1", 0.0, SKIP_PRICE_INVALID),
    ("1", None, SKIP_PRICE_INVALID),
])
def test_line_amount_skips(quantity, price, reason):
    line = line_amount(quantity, price)
    assert not line.ok
    assert line.skip_reason == reason
    assert line.amount == 0.0


def test_line_amount_ok():
    line = line_amount("2", 100.0)
    assert line.ok
    assert line.amount == 200.0


def test_strict_total_aborts_on_bad_quantity():
    assert strict_total([("2", 100.0), ("1", 50.0)]) == 250.0
    assert strict_total([("2", 100.0), ("two", 50.0)]) is None


def test_discount_percent():
    assert discount_percent("0.1") == pytest.approx(10.0)
    assert discount_percent("10") == 10.0
    assert discount_percent("15%") == 15.0
    assert discount_percent("1") == 1.0
    assert discount_percent("") is None
    assert discount_percent("ten") is None
    assert discount_percent(None) is None


def test_promotion_activity_is_inclusive():
    assert is_promotion_active("2025-06-15", "2025-06-15", TODAY)
    assert not is_promotion_active("2025-06-16", "2025-07-01", TODAY)
    assert not is_promotion_active("bad", "2025-07-01", TODAY)


def test_fractional_rate_on_1000_gives_900():
    total, applied = apply_promotions(1000.0, [Promo(1, "0.1")], TODAY)
    assert total == pytest.approx(900.0)
    assert [a.promo_id for a in applied] == [1]


def test_promotions_are_cumulative_in_id_order():
    promos = [Promo(2, "50"), Promo(1, "10%")]
    total, applied = apply_promotions(1000.0, promos, TODAY)
    assert total == pytest.approx(450.0)
    assert [a.promo_id for a in applied] == [1, 2]
    assert applied[0].total_after == pytest.approx(900.0)


def test_inactive_and_unreadable_promotions_skipped():
    promos = [
        Promo(1, "10", start_date="2024-01-01", end_date="2024-12-31"),
        Promo(2, "abc"),
        Promo(3, "10", start_date=None),
    ]
    total, applied = apply_promotions(500.0, promos, TODAY)
    assert total == 500.0
    assert applied == []


def test_monthly_payment():
    assert monthly_payment(1200.0, 12) == pytest.approx(100.0)
    assert monthly_payment(1200.0, None) == pytest.approx(100.0)
    assert monthly_payment(1200.0, 0) == pytest.approx(1200.0)
