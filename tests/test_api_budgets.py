from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture()
def checking_id(client) -> int:
    response = client.post("/api/accounts", json={"name": "Checking", "balance": "1000"})
    return response.get_json()["account"]["id"]


def _create_budget(client, **overrides) -> dict:
    payload = {"name": "Everything", "amount": "300", "period": "monthly"}
    payload.update(overrides)
    response = client.post("/api/budgets", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["budget"]


def test_budget_crud(client):
    budget = _create_budget(client, notification_threshold=90)
    assert budget["amount"] == "300.00"
    assert budget["notificationThreshold"] == 90

    listing = client.get("/api/budgets").get_json()
    assert listing["count"] == 1

    updated = client.put(f"/api/budgets/{budget['id']}", json={"amount": "450", "name": "More"})
    assert updated.status_code == 200
    assert updated.get_json()["budget"]["amount"] == "450.00"

    assert client.delete(f"/api/budgets/{budget['id']}").status_code == 200
    missing = client.get(f"/api/budgets/{budget['id']}")
    assert missing.status_code == 404
    assert missing.get_json()["message"] == "Budget not found"


def test_custom_budget_requires_end_date(client):
    response = client.post(
        "/api/budgets",
        json={"name": "Trip", "amount": "800", "period": "custom", "start_date": "2024-06-01T00:00:00"},
    )

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_update_revalidates_merged_budget(client):
    budget = _create_budget(client)

    response = client.put(f"/api/budgets/{budget['id']}", json={"period": "custom"})

    assert response.status_code == 400


def test_budget_with_foreign_category_is_rejected(client):
    response = client.post(
        "/api/budgets", json={"name": "Food", "amount": "100", "category_id": 777}
    )

    assert response.status_code == 404


def test_progress_counts_current_month_expenses(client, checking_id):
    budget = _create_budget(client)
    for amount, kind in (("50", "expense"), ("100", "expense"), ("900", "income")):
        client.post(
            "/api/transactions",
            json={"account_id": checking_id, "amount": amount, "type": kind, "description": kind},
        )
    client.post(
        "/api/transactions",
        json={
            "account_id": checking_id,
            "amount": "75",
            "type": "expense",
            "description": "Long ago",
            "occurred_at": "2001-01-01T12:00:00",
        },
    )

    body = client.get(f"/api/budgets/{budget['id']}/progress").get_json()

    progress = body["progress"]
    assert body["success"] is True
    assert progress["spent"] == "150.00"
    assert progress["remaining"] == "150.00"
    assert progress["percentage"] == 50.0
    assert progress["transactionCount"] == 2
    assert progress["status"] in {"under", "over"}
    first_of_month = datetime.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    assert progress["periodStart"] == first_of_month.isoformat()


def test_progress_all_lists_only_active_budgets(client):
    active = _create_budget(client, name="Active")
    _create_budget(client, name="Paused", is_active=False)

    body = client.get("/api/budgets/progress/all").get_json()

    assert body["count"] == 1
    assert body["budgets"][0]["id"] == active["id"]
    assert body["budgets"][0]["progress"]["spent"] == "0.00"


def test_progress_for_missing_budget(client):
    response = client.get("/api/budgets/12345/progress")

    assert response.status_code == 404
