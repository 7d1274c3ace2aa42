"""API test fixtures: a throwaway SQLite database per test."""
import functools
import os
import tempfile

import pytest

_TMP_DIR = tempfile.mkdtemp(prefix="dealership-tests-")
_DB_PATH = os.path.join(_TMP_DIR, "test.db")

# Must be set before the app (and its settings) are imported
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["JWT_SECRET"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["SUPERUSER_LOGIN"] = "admin"
os.environ["SUPERUSER_PASSWORD"] = "admin123"

from fastapi.testclient import TestClient  # noqa: E402

from dealership.core.database import async_session_maker  # noqa: E402
from dealership.main import app  # noqa: E402

SUPERUSER_LOGIN = "admin"
SUPERUSER_PASSWORD = "admin123"
PASSWORD = "secret123"


@pytest.fixture
def client():
    """Test client with the lifespan running (tables, roles, superuser)."""
    with TestClient(app) as c:
        yield c
    if os.path.exists(_DB_PATH):
        os.remove(_DB_PATH)


@pytest.fixture
def run_db(client):
    """Run ``fn(session, *args)`` on the app's event loop and return its result."""
    async def _with_session(fn, *args, **kwargs):
        async with async_session_maker() as session:
            return await fn(session, *args, **kwargs)

    def _run(fn, *args, **kwargs):
        return client.portal.call(functools.partial(_with_session, fn, *args, **kwargs))
    return _run


def login(client, username, password=PASSWORD):
    r = client.post("/api/login", data={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['data']['accessToken']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, SUPERUSER_LOGIN, SUPERUSER_PASSWORD)


@pytest.fixture
def world(client, admin_headers):
    """
    A dealer with one staff member and one manager, an EVM account,
    a model with one variant priced 100 and one customer.
    """
    r = client.post("/api/admin/dealers", json={"dealerName": "North Motors"}, headers=admin_headers)
    assert r.status_code == 200, r.text
    dealer_id = r.json()["data"]["id"]

    for username, roles, dealer in (
        ("staff1", ["STAFF"], dealer_id),
        ("manager1", ["MANAGER"], dealer_id),
        ("evm1", ["EVM"], None),
    ):
        r = client.post(
            "/api/admin/users",
            json={"username": username, "password": PASSWORD, "roles": roles, "dealerId": dealer},
            headers=admin_headers,
        )
        assert r.status_code == 200, r.text

    staff = login(client, "staff1")
    manager = login(client, "manager1")
    evm = login(client, "evm1")

    r = client.post("/api/evm/models", json={"modelName": "Aurora", "description": "compact"}, headers=evm)
    assert r.status_code == 200, r.text
    model_id = r.json()["data"]["id"]
    r = client.post(
        "/api/evm/variants",
        json={"modelId": model_id, "versionName": "Standard", "color": "Red", "price": 100.0, "stock": 2},
        headers=evm,
    )
    assert r.status_code == 200, r.text
    variant_id = r.json()["data"]["id"]

    r = client.post("/api/staff/customers", json={"name": "Jane Roe", "email": "jane@example.com"}, headers=staff)
    assert r.status_code == 200, r.text
    customer_id = r.json()["data"]["id"]

    return {
        "dealer_id": dealer_id,
        "model_id": model_id,
        "variant_id": variant_id,
        "customer_id": customer_id,
        "admin": admin_headers,
        "staff": staff,
        "manager": manager,
        "evm": evm,
    }


def place_order(client, world, quantity=1, unit_price=None, custom=False, customer_id=None):
    body = {
        "customerId": world["customer_id"] if customer_id is None else customer_id,
        "modelId": world["model_id"],
        "quantity": quantity,
        "isCustom": custom,
    }
    if not custom:
        body["variantId"] = world["variant_id"]
    if unit_price is not None:
        body["unitPrice"] = unit_price
    r = client.post("/api/staff/orders", json=body, headers=world["staff"])
    assert r.status_code == 200, r.text
    return r.json()["data"]["orderId"]
