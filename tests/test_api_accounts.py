from __future__ import annotations


def _open(client, **overrides) -> dict:
    payload = {"name": "Checking", "account_type": "checking", "balance": "1000.00"}
    payload.update(overrides)
    response = client.post("/api/accounts", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["account"]


def test_missing_user_header_is_unauthorized(anonymous_client):
    response = anonymous_client.get("/api/accounts")

    assert response.status_code == 401
    body = response.get_json()
    assert body["success"] is False
    assert body["statusCode"] == 401


def test_unknown_user_is_unauthorized(anonymous_client):
    response = anonymous_client.get("/api/accounts", headers={"X-User-Id": "9999"})

    assert response.status_code == 401


def test_create_and_fetch_account(client):
    created = _open(client, currency="eur", institution="First Bank")

    assert created["balance"] == "1000.00"
    assert created["openingBalance"] == "1000.00"
    assert created["currency"] == "EUR"

    fetched = client.get(f"/api/accounts/{created['id']}").get_json()
    assert fetched["success"] is True
    assert fetched["account"]["institution"] == "First Bank"

    listing = client.get("/api/accounts").get_json()
    assert listing["count"] == 1


def test_create_account_validation_errors(client):
    response = client.post("/api/accounts", json={"account_type": "yacht"})

    assert response.status_code == 400
    errors = response.get_json()["errors"]
    assert "name" in errors
    assert "account_type" in errors


def test_update_cannot_touch_balance(client):
    account = _open(client)

    rejected = client.put(f"/api/accounts/{account['id']}", json={"balance": "5"})
    assert rejected.status_code == 400
    assert "balance" in rejected.get_json()["errors"]

    renamed = client.put(f"/api/accounts/{account['id']}", json={"name": "Main", "is_active": False})
    assert renamed.status_code == 200
    assert renamed.get_json()["account"]["name"] == "Main"
    assert renamed.get_json()["account"]["isActive"] is False
    assert renamed.get_json()["account"]["balance"] == "1000.00"


def test_delete_account_in_use_conflicts(client):
    account = _open(client)
    client.post(
        "/api/transactions",
        json={"account_id": account["id"], "amount": "10", "type": "expense", "description": "Tea"},
    )

    response = client.delete(f"/api/accounts/{account['id']}")

    assert response.status_code == 409
    assert response.get_json()["message"] == "Cannot delete account with associated transactions"


def test_delete_unused_account(client):
    account = _open(client)

    assert client.delete(f"/api/accounts/{account['id']}").status_code == 200
    assert client.get(f"/api/accounts/{account['id']}").status_code == 404


def test_account_history_endpoint(client):
    account = _open(client, balance="100")
    for amount, kind, when in (("50", "income", "2024-01-05T09:00:00"), ("20", "expense", "2024-01-06T09:00:00")):
        client.post(
            "/api/transactions",
            json={
                "account_id": account["id"],
                "amount": amount,
                "type": kind,
                "occurred_at": when,
                "description": kind,
            },
        )

    body = client.get(f"/api/accounts/{account['id']}/history").get_json()

    assert [entry["balance"] for entry in body["balanceHistory"]] == ["150.00", "130.00"]

    windowed = client.get(
        f"/api/accounts/{account['id']}/history?start=2024-01-06T00:00:00"
    ).get_json()
    assert [entry["transaction"]["type"] for entry in windowed["balanceHistory"]] == ["expense"]


def test_account_history_rejects_bad_dates(client):
    account = _open(client)

    response = client.get(f"/api/accounts/{account['id']}/history?start=yesterday")

    assert response.status_code == 400
    assert "start" in response.get_json()["errors"]
