"""Payment, promotion and installment workflow."""
from datetime import date, timedelta

import pytest
from conftest import place_order

from dealership.models import Order, OrderDetail
from dealership.services.payment_service import ERR_INVALID_QUANTITY, process_payment


def _active_promotion(client, world, rate):
    today = date.today()
    r = client.post(
        "/api/evm/promotions",
        json={
            "description": f"rate {rate}",
            "startDate": (today - timedelta(days=1)).isoformat(),
            "endDate": (today + timedelta(days=1)).isoformat(),
            "discountRate": rate,
        },
        headers=world["evm"],
    )
    assert r.status_code == 200, r.text
    promo_id = r.json()["data"]["id"]
    r = client.post(f"/api/evm/promotions/{promo_id}/dealers", json={"dealerId": world["dealer_id"]}, headers=world["evm"])
    assert r.status_code == 200, r.text
    return promo_id


def _pay(client, world, order_id, **extra):
    return client.post("/api/staff/payments", json={"orderId": order_id, **extra}, headers=world["staff"])


def test_full_transfer_payment(client, world):
    order_id = place_order(client, world, quantity=3)
    r = _pay(client, world, order_id)
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["method"] == "TT"
    assert data["amount"] == pytest.approx(300.0)
    assert data["installmentPlan"] is None
    assert data["appliedPromotions"] == []


def test_second_payment_rejected(client, world):
    order_id = place_order(client, world)
    assert _pay(client, world, order_id).status_code == 200
    r = _pay(client, world, order_id)
    assert r.status_code == 400
    assert r.json() == {"status": "error", "message": "Payment already exists", "data": None}


def test_unknown_order_is_404(client, world):
    r = _pay(client, world, 9999)
    assert r.status_code == 404
    assert r.json()["message"] == "Order not found"


def test_dealer_initiated_order_cannot_be_paid(client, world):
    order_id = place_order(client, world, customer_id=0)
    r = _pay(client, world, order_id)
    assert r.status_code == 400
    assert r.json()["message"] == "Order has no valid customer"


def test_fractional_promotion_discounts_total(client, world):
    _active_promotion(client, world, "0.1")
    order_id = place_order(client, world, quantity=10)
    data = _pay(client, world, order_id).json()["data"]
    assert data["amount"] == pytest.approx(900.0)
    assert [p["percent"] for p in data["appliedPromotions"]] == [pytest.approx(10.0)]


def test_promotions_apply_cumulatively(client, world):
    _active_promotion(client, world, "10")
    _active_promotion(client, world, "50%")
    order_id = place_order(client, world, quantity=10)
    assert _pay(client, world, order_id).json()["data"]["amount"] == pytest.approx(450.0)


def test_promotion_of_other_dealer_ignored(client, world):
    r = client.post("/api/admin/dealers", json={"dealerName": "South Motors"}, headers=world["admin"])
    other = r.json()["data"]["id"]
    today = date.today().isoformat()
    r = client.post(
        "/api/evm/promotions",
        json={"description": "elsewhere", "startDate": today, "endDate": today, "discountRate": "20"},
        headers=world["evm"],
    )
    promo_id = r.json()["data"]["id"]
    client.post(f"/api/evm/promotions/{promo_id}/dealers", json={"dealerId": other}, headers=world["evm"])
    order_id = place_order(client, world, quantity=1)
    assert _pay(client, world, order_id).json()["data"]["amount"] == pytest.approx(100.0)


def test_financed_payment_without_plan_defaults(client, world):
    order_id = place_order(client, world, quantity=12)
    r = _pay(client, world, order_id, method="BANK")
    assert r.status_code == 200, r.text
    plan = r.json()["data"]["installmentPlan"]
    assert plan["termMonth"] == 12
    assert plan["interestRate"] == 0.0
    assert plan["status"] == "ACTIVE"
    assert plan["monthlyPay"] == pytest.approx(1200.0 / 12)


def test_financed_payment_with_plan(client, world):
    order_id = place_order(client, world, quantity=6)
    r = _pay(client, world, order_id, method="installment", plan={"interestRate": 5.5, "termMonth": 6})
    plan = r.json()["data"]["installmentPlan"]
    assert plan["termMonth"] == 6
    assert plan["interestRate"] == 5.5
    assert plan["monthlyPay"] == pytest.approx(100.0)


def test_payment_lookup_and_plan_update(client, world):
    order_id = place_order(client, world, quantity=12)
    plan_id = _pay(client, world, order_id, method="BANK").json()["data"]["installmentPlan"]["id"]

    r = client.get(f"/api/staff/payments/by-order/{order_id}", headers=world["staff"])
    assert r.status_code == 200
    assert r.json()["data"]["installmentPlan"]["id"] == plan_id

    r = client.patch(f"/api/staff/installment-plans/{plan_id}", json={"status": "PAID", "termMonth": 10}, headers=world["staff"])
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "PAID"
    assert r.json()["data"]["termMonth"] == 10

    r = client.patch(f"/api/staff/installment-plans/{plan_id}", json={"status": "DONE", "termMonth": 10}, headers=world["staff"])
    assert r.status_code == 400


def test_customers_with_active_installments(client, world):
    order_id = place_order(client, world, quantity=12)
    _pay(client, world, order_id, method="BANK")
    r = client.get("/api/staff/installment-customers", headers=world["staff"])
    assert r.status_code == 200
    rows = r.json()["data"]
    assert len(rows) == 1
    assert rows[0]["customerId"] == world["customer_id"]
    assert rows[0]["outstandingAmount"] == pytest.approx(1200.0)

    r = client.get("/api/evm/installment-customers", params={"dealerId": world["dealer_id"] + 100}, headers=world["evm"])
    assert r.json()["data"] == []


def test_non_numeric_quantity_aborts_payment(client, world, run_db):
    order_id = place_order(client, world)

    async def corrupt(session, oid):
        session.add(OrderDetail(order_id=oid, serial_id=None, quantity="two", unit_price=10.0))
        await session.commit()

    run_db(corrupt, order_id)
    outcome = run_db(process_payment, order_id, "TT")
    assert not outcome.ok
    assert outcome.error == ERR_INVALID_QUANTITY
    r = client.get(f"/api/staff/payments/by-order/{order_id}", headers=world["staff"])
    assert r.status_code == 404


def test_total_spans_every_detail_line(client, world, run_db):
    order_id = place_order(client, world, quantity=2)

    async def add_line(session, oid):
        session.add(OrderDetail(order_id=oid, serial_id=None, quantity="1", unit_price=50.0))
        await session.commit()

    run_db(add_line, order_id)
    outcome = run_db(process_payment, order_id, None)
    assert outcome.ok
    assert outcome.payment.amount == pytest.approx(250.0)
    assert outcome.plan is None


def test_order_without_details(client, world, run_db):
    async def bare_order(session):
        order = Order(customer_id=world["customer_id"], dealer_staff_id=1, model_id=world["model_id"],
                      order_date="2025-01-01 00:00:00", status="Pending", is_custom=False)
        session.add(order)
        await session.commit()
        return order.id

    order_id = run_db(bare_order)
    assert run_db(process_payment, order_id, "TT").error == "Order has no detail lines"


def test_customers_who_paid_by_full_transfer(client, world):
    first = place_order(client, world, quantity=2)
    second = place_order(client, world, quantity=1)
    assert _pay(client, world, first).status_code == 200
    assert _pay(client, world, second, method="tt").status_code == 200
    r = client.post("/api/staff/customers", json={"name": "Max Doe"}, headers=world["staff"])
    financed_customer = r.json()["data"]["id"]
    financed = place_order(client, world, quantity=3, customer_id=financed_customer)
    assert _pay(client, world, financed, method="BANK").status_code == 200

    r = client.get("/api/staff/tt-customers", headers=world["staff"])
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["message"].endswith("300.00")
    rows = body["data"]
    assert len(rows) == 1
    assert rows[0]["customerId"] == world["customer_id"]
    assert rows[0]["paidAmount"] == pytest.approx(300.0)
    assert rows[0]["paymentCount"] == 2


def test_full_transfer_customers_empty(client, world):
    r = client.get("/api/staff/tt-customers", headers=world["manager"])
    assert r.status_code == 200
    assert r.json()["data"] == []
