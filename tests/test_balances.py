from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import update

from budgetwise.models import Account, Transaction
from budgetwise.services.balances import audit_balances, balance_history, ledger_delta


def _row(id_: int, account_id: int, amount: str, type_: str, when: datetime, **extra) -> Transaction:
    return Transaction(
        id=id_,
        user_id=1,
        account_id=account_id,
        amount=Decimal(amount),
        type=type_,
        occurred_at=when,
        description=f"txn {id_}",
        **extra,
    )


def test_ledger_delta_signs_each_side_of_a_transfer():
    rows = [
        _row(1, 1, "100", "income", datetime(2024, 1, 1)),
        _row(2, 1, "30", "expense", datetime(2024, 1, 2)),
        _row(3, 1, "20", "transfer", datetime(2024, 1, 3), transfer_account_id=2),
        _row(4, 2, "5", "transfer", datetime(2024, 1, 4), transfer_account_id=1),
    ]

    assert ledger_delta(1, rows) == Decimal("55")
    assert ledger_delta(2, rows) == Decimal("15")
    assert ledger_delta(3, rows) == Decimal("0")


def test_balance_history_replays_past_and_skips_future():
    account = Account(id=1, user_id=1, name="Checking", balance=Decimal("1070"))
    rows = [
        _row(1, 1, "100", "income", datetime(2024, 1, 5)),
        _row(2, 1, "30", "expense", datetime(2024, 1, 10)),
        _row(3, 2, "50", "transfer", datetime(2024, 1, 12), transfer_account_id=1),
        _row(4, 1, "50", "expense", datetime(2024, 2, 1)),
    ]

    history = balance_history(account, rows, now=datetime(2024, 1, 20))

    # The stored 1070 already includes the future -50 expense.
    assert [entry["balance"] for entry in history] == ["1100", "1070", "1120"]
    assert [entry["transaction"]["id"] for entry in history] == [1, 2, 3]
    assert history[0]["date"] == "2024-01-05T00:00:00"


def test_balance_history_window_keeps_running_total():
    account = Account(id=1, user_id=1, name="Checking", balance=Decimal("70"))
    rows = [
        _row(1, 1, "100", "income", datetime(2024, 1, 5)),
        _row(2, 1, "30", "expense", datetime(2024, 1, 10)),
    ]

    history = balance_history(
        account, rows, now=datetime(2024, 3, 1), start=datetime(2024, 1, 8), end=datetime(2024, 1, 31)
    )

    assert len(history) == 1
    assert history[0]["balance"] == "70"


def test_audit_flags_drifted_account(
    reconciler, accounts, transactions, account_factory, session_factory, user, caplog
):
    healthy = account_factory("Healthy", balance="100")
    broken = account_factory("Broken", balance="100")
    reconciler.create(
        Transaction(account_id=broken.id, amount=Decimal("10"), type="expense",
                    occurred_at=datetime(2024, 1, 1), description="Coffee"),
        user_id=user.id,
    )
    with session_factory() as session:
        session.exec(update(Account).where(Account.id == broken.id).values(balance=Decimal("500")))

    with caplog.at_level(logging.WARNING):
        report = audit_balances(user_id=user.id, accounts=accounts, transactions=transactions)

    by_id = {row.account_id: row for row in report}
    assert by_id[healthy.id].consistent
    assert not by_id[broken.id].consistent
    assert by_id[broken.id].expected == Decimal("90")
    assert by_id[broken.id].drift == Decimal("410")
    assert any("Balance drift detected" in r.getMessage() for r in caplog.records)
