"""Vehicle catalogue and promotion management."""


def test_variants_listed_by_model(client, world):
    r = client.post(
        "/api/evm/variants",
        json={"modelId": world["model_id"], "versionName": "Sport", "price": 180.0},
        headers=world["evm"],
    )
    sport_id = r.json()["data"]["id"]
    client.post(f"/api/evm/variants/{sport_id}/active", params={"active": False}, headers=world["evm"])

    url = f"/api/evm/models/{world['model_id']}/variants"
    r = client.get(url, headers=world["evm"])
    assert r.status_code == 200
    assert [v["versionName"] for v in r.json()["data"]] == ["Standard", "Sport"]
    active = client.get(url, params={"active": True}, headers=world["evm"]).json()["data"]
    assert [v["id"] for v in active] == [world["variant_id"]]
    disabled = client.get(url, params={"active": False}, headers=world["evm"]).json()["data"]
    assert [v["id"] for v in disabled] == [sport_id]

    assert client.get("/api/evm/models/999/variants", headers=world["evm"]).status_code == 404


def test_promotion_dates_compared_as_dates(client, world):
    """2025-1-5 is before 2025-1-10 even though the strings sort the other way."""
    r = client.post(
        "/api/evm/promotions",
        json={"description": "winter", "startDate": "2025-1-5", "endDate": "2025-1-10", "discountRate": "5"},
        headers=world["evm"],
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["startDate"] == "2025-01-05"
    assert data["endDate"] == "2025-01-10"

    r = client.post(
        "/api/evm/promotions",
        json={"description": "reversed", "startDate": "2025-02-01", "endDate": "2025-1-31", "discountRate": "5"},
        headers=world["evm"],
    )
    assert r.status_code == 400


def test_promotion_rate_must_be_numeric(client, world):
    r = client.post(
        "/api/evm/promotions",
        json={"description": "bad", "startDate": "2025-01-01", "endDate": "2025-01-31", "discountRate": "lots"},
        headers=world["evm"],
    )
    assert r.status_code == 400


def test_compare_models_by_name(client, world):
    """Public comparison lists matching active models with their active variants only."""
    evm = world["evm"]
    r = client.post("/api/evm/models", json={"modelName": "Aurora Max"}, headers=evm)
    max_id = r.json()["data"]["id"]
    client.post("/api/evm/variants", json={"modelId": max_id, "versionName": "Long Range", "price": 300.0}, headers=evm)
    r = client.post("/api/evm/variants", json={"modelId": max_id, "versionName": "Old", "price": 200.0}, headers=evm)
    client.post(f"/api/evm/variants/{r.json()['data']['id']}/active", params={"active": False}, headers=evm)
    r = client.post("/api/evm/models", json={"modelName": "Aurora Retired"}, headers=evm)
    client.post(f"/api/evm/models/{r.json()['data']['id']}/active", params={"active": False}, headers=evm)
    client.post("/api/evm/models", json={"modelName": "Borealis"}, headers=evm)

    r = client.get("/api/public/compare", params={"vehicleName": "aurora"})
    assert r.status_code == 200, r.text
    models = {m["modelName"]: [v["versionName"] for v in m["variants"]] for m in r.json()["data"]}
    assert models == {"Aurora": ["Standard"], "Aurora Max": ["Long Range"]}


def test_compare_without_match_is_404(client, world):
    r = client.get("/api/public/compare", params={"vehicleName": "Zephyr"})
    assert r.status_code == 404
    assert r.json()["status"] == "error"
    assert client.get("/api/public/compare", params={"vehicleName": "  "}).status_code == 400
