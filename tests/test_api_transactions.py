from __future__ import annotations

from datetime import datetime

import pytest

from budgetwise.extensions import session_scope
from budgetwise.models import User


@pytest.fixture()
def accounts_pair(client):
    def _open(name: str, balance: str) -> int:
        response = client.post("/api/accounts", json={"name": name, "balance": balance})
        return response.get_json()["account"]["id"]

    return _open("Checking", "500"), _open("Savings", "100")


def _balance(client, account_id: int) -> str:
    return client.get(f"/api/accounts/{account_id}").get_json()["account"]["balance"]


def test_transfer_lifecycle_keeps_balances_consistent(client, accounts_pair):
    checking, savings = accounts_pair

    created = client.post(
        "/api/transactions",
        json={
            "account_id": checking,
            "transfer_account_id": savings,
            "amount": "50",
            "type": "transfer",
            "description": "Move to savings",
        },
    )
    assert created.status_code == 201
    txn = created.get_json()["transaction"]
    assert txn["amount"] == "50.00"
    assert (_balance(client, checking), _balance(client, savings)) == ("450.00", "150.00")

    updated = client.put(f"/api/transactions/{txn['id']}", json={"amount": "80"})
    assert updated.status_code == 200
    assert (_balance(client, checking), _balance(client, savings)) == ("420.00", "180.00")

    deleted = client.delete(f"/api/transactions/{txn['id']}")
    assert deleted.status_code == 200
    assert (_balance(client, checking), _balance(client, savings)) == ("500.00", "100.00")
    assert client.get(f"/api/transactions/{txn['id']}").status_code == 404


def test_transfer_without_destination_is_unprocessable(client, accounts_pair):
    checking, _ = accounts_pair

    response = client.post(
        "/api/transactions",
        json={"account_id": checking, "amount": "10", "type": "transfer", "description": "Oops"},
    )

    assert response.status_code == 422
    assert response.get_json()["success"] is False
    assert _balance(client, checking) == "500.00"


def test_negative_amount_is_a_bad_request(client, accounts_pair):
    checking, _ = accounts_pair

    response = client.post(
        "/api/transactions",
        json={"account_id": checking, "amount": "-10", "type": "expense", "description": "Neg"},
    )

    assert response.status_code == 400
    assert "amount" in response.get_json()["errors"]


def test_unknown_account_is_not_found(client):
    response = client.post(
        "/api/transactions",
        json={"account_id": 4040, "amount": "10", "type": "income", "description": "Ghost"},
    )

    assert response.status_code == 404
    assert response.get_json()["message"] == "Account not found or doesn't belong to you"


def test_description_edit_does_not_move_money(client, accounts_pair):
    checking, _ = accounts_pair
    txn = client.post(
        "/api/transactions",
        json={"account_id": checking, "amount": "40", "type": "expense", "description": "Lunch"},
    ).get_json()["transaction"]

    response = client.put(f"/api/transactions/{txn['id']}", json={"description": "Team lunch"})

    assert response.get_json()["transaction"]["description"] == "Team lunch"
    assert _balance(client, checking) == "460.00"


def test_list_filters_and_paginates(client, accounts_pair):
    checking, savings = accounts_pair
    entries = [
        (checking, "income", "Salary", "2024-01-01T09:00:00"),
        (checking, "expense", "Groceries", "2024-01-02T09:00:00"),
        (savings, "expense", "Bank fee", "2024-01-03T09:00:00"),
    ]
    for account_id, kind, description, when in entries:
        client.post(
            "/api/transactions",
            json={
                "account_id": account_id,
                "amount": "5",
                "type": kind,
                "description": description,
                "occurred_at": when,
            },
        )

    body = client.get("/api/transactions?limit=2&page=1").get_json()
    assert body["total"] == 3
    assert body["pagination"] == {"page": 1, "limit": 2, "pages": 2}
    assert [t["description"] for t in body["transactions"]] == ["Bank fee", "Groceries"]

    expenses = client.get(f"/api/transactions?type=expense&account_id={checking}").get_json()
    assert [t["description"] for t in expenses["transactions"]] == ["Groceries"]

    searched = client.get("/api/transactions?search=sal").get_json()
    assert [t["description"] for t in searched["transactions"]] == ["Salary"]

    bad = client.get("/api/transactions?type=refund")
    assert bad.status_code == 400


def test_cannot_reach_other_users_transactions(app, client, accounts_pair):
    checking, _ = accounts_pair
    txn = client.post(
        "/api/transactions",
        json={"account_id": checking, "amount": "40", "type": "expense", "description": "Mine"},
    ).get_json()["transaction"]

    with app.app_context():
        with session_scope() as session:
            stranger = User(username="stranger")
            session.add(stranger)
            session.flush()
            stranger_id = stranger.id

    headers = {"X-User-Id": str(stranger_id)}
    assert client.get(f"/api/transactions/{txn['id']}", headers=headers).status_code == 404
    assert client.delete(f"/api/transactions/{txn['id']}", headers=headers).status_code == 404
    assert _balance(client, checking) == "460.00"


def test_offset_timestamps_default_to_server_local_time(client, accounts_pair):
    checking, _ = accounts_pair
    sent = "2024-03-10T08:30:00+09:00"

    response = client.post(
        "/api/transactions",
        json={
            "account_id": checking,
            "amount": "12.50",
            "type": "expense",
            "occurred_at": sent,
            "description": "Breakfast",
        },
    )

    expected = datetime.fromisoformat(sent).astimezone().replace(tzinfo=None)
    assert response.get_json()["transaction"]["date"] == expected.isoformat()
