"""Login and the path-prefix authorization filter."""
from conftest import PASSWORD, SUPERUSER_LOGIN, SUPERUSER_PASSWORD, login

from dealership.services.auth_service import create_access_token, decode_token


def test_login_returns_token(client):
    """POST /api/login with the superuser credentials returns a bearer token."""
    r = client.post("/api/login", data={"username": SUPERUSER_LOGIN, "password": SUPERUSER_PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "success"
    assert body["data"]["tokenType"] == "bearer"
    assert body["data"]["roles"] == ["ADMIN"]
    payload = decode_token(body["data"]["accessToken"])
    assert payload["sub"] == SUPERUSER_LOGIN
    assert payload["roles"] == ["ADMIN"]


def test_login_wrong_password(client):
    r = client.post("/api/login", data={"username": SUPERUSER_LOGIN, "password": "nope"})
    assert r.status_code == 401
    assert r.json()["status"] == "error"


def test_missing_token_is_401(client):
    r = client.get("/api/staff/orders")
    assert r.status_code == 401
    body = r.json()
    assert body == {"status": "error", "message": "Missing or invalid Authorization header", "data": None}


def test_garbage_token_is_401(client):
    r = client.get("/api/staff/orders", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid or expired token"


def test_wrong_role_is_403(client, world):
    """A STAFF token cannot reach the manufacturer area."""
    r = client.get("/api/evm/models", headers=world["staff"])
    assert r.status_code == 403
    assert r.json()["message"] == "Access denied"


def test_admin_reaches_evm_area(client, admin_headers):
    r = client.get("/api/evm/models", headers=admin_headers)
    assert r.status_code == 200


def test_manager_reaches_staff_area(client, world):
    r = client.get("/api/staff/orders", headers=world["manager"])
    assert r.status_code == 200


def test_unknown_api_prefix_is_denied(client, admin_headers):
    r = client.get("/api/unknown/things", headers=admin_headers)
    assert r.status_code == 403


def test_token_carries_dealer(client, world):
    token = world["staff"]["Authorization"].split(" ", 1)[1]
    payload = decode_token(token)
    assert payload["dealerId"] == world["dealer_id"]
    assert payload["roles"] == ["STAFF"]


def test_expired_token_rejected():
    token = create_access_token(user_id=1, username="x", roles=["ADMIN"], dealer_id=None, expires_minutes=-1)
    assert decode_token(token) is None


def test_disabled_user_cannot_login(client, world):
    users = client.get("/api/admin/users", headers=world["admin"]).json()["data"]
    staff = next(u for u in users if u["username"] == "staff1")
    r = client.patch(f"/api/admin/users/{staff['id']}", json={"isActive": False}, headers=world["admin"])
    assert r.status_code == 200
    r = client.post("/api/login", data={"username": "staff1", "password": PASSWORD})
    assert r.status_code == 401


def test_duplicate_username_rejected(client, world):
    r = client.post(
        "/api/admin/users",
        json={"username": "STAFF1", "password": PASSWORD, "roles": ["STAFF"]},
        headers=world["admin"],
    )
    assert r.status_code == 400
    assert login(client, "staff1")
