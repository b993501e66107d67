"""Timestamps carrying a UTC offset are stored as wall-clock time in the app's zone."""

from __future__ import annotations

from decimal import Decimal
from urllib.parse import quote

import pytest


@pytest.fixture()
def app_timezone() -> str:
    return "UTC"


@pytest.fixture()
def account_id(client) -> int:
    response = client.post("/api/accounts", json={"name": "Main", "balance": "1000"})
    return response.get_json()["account"]["id"]


def _spend(client, account_id: int, amount: str, when: str) -> dict:
    response = client.post(
        "/api/transactions",
        json={
            "account_id": account_id,
            "amount": amount,
            "type": "expense",
            "occurred_at": when,
            "description": f"Spent {amount}",
        },
    )
    assert response.status_code == 201, response.get_json()
    return response.get_json()["transaction"]


def test_offsets_are_converted_not_dropped(client, account_id):
    new_york = _spend(client, account_id, "40", "2024-01-31T23:00:00-05:00")
    london = _spend(client, account_id, "60", "2024-01-31T23:00:00+00:00")

    assert new_york["date"] == "2024-02-01T04:00:00"
    assert london["date"] == "2024-01-31T23:00:00"

    stored = client.get(f"/api/transactions/{new_york['id']}").get_json()["transaction"]
    assert stored["date"] == "2024-02-01T04:00:00"


def test_offset_decides_which_period_a_transaction_lands_in(client, account_id):
    _spend(client, account_id, "40", "2024-01-31T23:00:00-05:00")
    _spend(client, account_id, "60", "2024-01-31T23:00:00+00:00")
    budget = client.post(
        "/api/budgets",
        json={
            "name": "January",
            "amount": "500",
            "period": "custom",
            "start_date": "2024-01-01T00:00:00",
            "end_date": "2024-01-31T23:59:59",
        },
    ).get_json()["budget"]

    progress = client.get(f"/api/budgets/{budget['id']}/progress").get_json()["progress"]

    assert progress["spent"] == "60.00"
    assert progress["transactionCount"] == 1


def test_budget_dates_with_offsets_are_converted(client):
    response = client.post(
        "/api/budgets",
        json={
            "name": "Trip",
            "amount": "800",
            "period": "custom",
            "start_date": "2024-06-01T00:00:00+02:00",
            "end_date": "2024-06-30T23:59:59-04:00",
        },
    )

    assert response.status_code == 201
    budget = response.get_json()["budget"]
    assert budget["startDate"] == "2024-05-31T22:00:00"
    assert budget["endDate"] == "2024-07-01T03:59:59"


def test_transaction_filters_accept_offsets(client, account_id):
    _spend(client, account_id, "40", "2024-01-31T23:00:00-05:00")
    _spend(client, account_id, "60", "2024-01-31T23:00:00+00:00")

    start = quote("2024-02-01T01:00:00+01:00")
    body = client.get(f"/api/transactions?start={start}").get_json()

    assert [txn["amount"] for txn in body["transactions"]] == ["40.00"]


def test_history_window_accepts_offsets(client, account_id):
    _spend(client, account_id, "60", "2024-01-31T23:00:00+00:00")
    _spend(client, account_id, "40", "2024-01-31T23:00:00-05:00")

    start = quote("2024-02-01T00:30:00+01:00")
    end = quote("2024-02-01T00:00:00-05:00")
    response = client.get(f"/api/accounts/{account_id}/history?start={start}&end={end}")

    assert response.status_code == 200
    history = response.get_json()["balanceHistory"]
    assert [entry["date"] for entry in history] == ["2024-02-01T04:00:00"]
    assert Decimal(history[0]["balance"]) == Decimal("900")


def test_history_with_utc_start_does_not_fail(client, account_id):
    _spend(client, account_id, "25", "2024-01-10T12:00:00")

    start = quote("2024-01-01T00:00:00+00:00")
    response = client.get(f"/api/accounts/{account_id}/history?start={start}")

    assert response.status_code == 200
    assert [entry["balance"] for entry in response.get_json()["balanceHistory"]] == ["975.00"]
