"""Debt and sales arithmetic without a database."""
from dataclasses import dataclass
from typing import Optional

import pytest

from dealership.services.debt_service import is_cancelled, order_debt
from dealership.services.sales_service import in_date_range, monthly_breakdown, summarize_sales


@dataclass
class Detail:
    id: int
    quantity: Optional[str]
    unit_price: Optional[float]


@dataclass
class Paid:
    amount: Optional[float]


@dataclass
class Ord:
    id: int
    customer_id: int
    dealer_staff_id: int
    order_date: str
    status: str = "Pending"


def test_order_debt_example():
    """Lines 2x100 and 1x50 with 100 paid leave 150."""
    assert order_debt([Detail(1, "2", 100.0), Detail(2, "1", 50.0)], [Paid(100.0)]) == pytest.approx(150.0)


def test_order_debt_never_negative():
    assert order_debt([Detail(1, "1", 100.0)], [Paid(500.0)]) == 0.0


def test_order_debt_skips_bad_lines_and_payments():
    details = [Detail(1, "0", 100.0), Detail(2, "x", 100.0), Detail(3, "1", -5.0), Detail(4, "1", 80.0)]
    payments = [Paid(-20.0), Paid(None), Paid(30.0)]
    assert order_debt(details, payments) == pytest.approx(50.0)


def test_is_cancelled():
    assert is_cancelled("Cancelled")
    assert is_cancelled(" cancelled ")
    assert not is_cancelled("Pending")
    assert not is_cancelled(None)


def test_in_date_range_is_inclusive_string_compare():
    assert in_date_range("2025-01-01 00:00:00", "2025-01-01", "2025-01-31 23:59:59")
    assert in_date_range("2025-01-31 23:59:59", "2025-01-01", "2025-01-31 23:59:59")
    assert not in_date_range("2025-02-01 00:00:00", "2025-01-01", "2025-01-31 23:59:59")
    assert not in_date_range(None, "2025-01-01", "2025-01-31")


def test_two_orders_of_one_customer_fold_into_one_record():
    rows = [
        (Ord(1, 7, 10, "2025-01-02 10:00:00"), Detail(1, "2", 100.0)),
        (Ord(2, 7, 11, "2025-01-05 09:00:00"), Detail(2, "1", 300.0)),
    ]
    records = summarize_sales(rows, {10: "alice", 11: "bob"})
    assert len(records) == 1
    rec = records[0]
    assert rec.customer_id == 7
    assert rec.sale_amount == pytest.approx(500.0)
    assert rec.order_count == 2
    assert rec.sale_date == "2025-01-05 09:00:00"
    assert rec.dealer_staff_id == 11
    assert rec.staff_name == "bob"


def test_summarize_skips_missing_and_invalid_details():
    rows = [
        (Ord(1, 7, 10, "2025-01-02 10:00:00"), None),
        (Ord(2, 7, 10, "2025-01-03 10:00:00"), Detail(2, "0", 100.0)),
        (Ord(3, 8, 10, "2025-01-04 10:00:00"), Detail(3, "abc", 100.0)),
        (Ord(4, 8, 10, "2025-01-05 10:00:00"), Detail(4, "1", 40.0)),
    ]
    records = summarize_sales(rows, {})
    assert [(r.customer_id, r.sale_amount, r.order_count) for r in records] == [(8, 40.0, 1)]
    assert records[0].staff_name == "Unknown"


def test_monthly_breakdown_groups_by_order_month():
    rows = [
        (Ord(1, 7, 3, "2025-01-10 09:00:00"), Detail(1, "2", 100.0)),
        (Ord(2, 8, 3, "2025-01-31 23:00:00"), Detail(2, "1", 50.0)),
        (Ord(3, 7, 3, "2025-12-01 00:00:00"), Detail(3, "3", 10.0)),
        (Ord(4, 7, 3, "2024-01-10 09:00:00"), Detail(4, "1", 999.0)),
        (Ord(5, 7, 3, "2025-02-10 09:00:00", "Cancelled"), Detail(5, "1", 999.0)),
        (Ord(6, 7, 3, "2025-02-11 09:00:00"), Detail(6, "x", 999.0)),
        (Ord(7, 7, 3, "2025-03-11 09:00:00"), None),
    ]
    months = monthly_breakdown(rows, 2025)
    assert [m["month"] for m in months] == list(range(1, 13))
    assert months[0] == {"month": 1, "total_sales": 250.0, "total_orders": 2, "total_cars": 3}
    assert months[11]["total_sales"] == pytest.approx(30.0)
    assert months[11]["total_cars"] == 3
    assert all(m["total_orders"] == 0 for m in months[1:11])
