"""Application liveness."""


def test_health(client):
    """GET /health returns 200 and status ok."""
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"


def test_public_models_need_no_token(client):
    r = client.get("/api/public/models")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "success"
    assert body["data"] == []
