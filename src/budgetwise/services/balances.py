"""Ledger-derived balances: drift audit and running balance history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..domain.repositories import AccountRepository, TransactionRepository
from ..logging_config import get_logger
from ..models.account import Account
from ..models.transaction import Transaction
from .reconciler import LedgerEntry, forward_effects

logger = get_logger("balances")

ZERO = Decimal("0")


def effect_on(account_id: int, txn: Transaction) -> Decimal:
    """Signed change ``txn`` makes to ``account_id``; zero when unrelated."""

    return sum(
        (amount for target, amount in forward_effects(LedgerEntry.of(txn)) if target == account_id),
        ZERO,
    )


def ledger_delta(account_id: int, transactions: Iterable[Transaction]) -> Decimal:
    """Net effect of ``transactions`` on the account."""

    return sum((effect_on(account_id, txn) for txn in transactions), ZERO)


@dataclass(frozen=True, slots=True)
class BalanceDrift:
    """Stored balance compared with opening balance plus ledger."""

    account_id: int
    account_name: str
    stored: Decimal
    expected: Decimal

    @property
    def drift(self) -> Decimal:
        return self.stored - self.expected

    @property
    def consistent(self) -> bool:
        return self.drift == 0


def audit_balances(
    *,
    user_id: int,
    accounts: AccountRepository,
    transactions: TransactionRepository,
) -> list[BalanceDrift]:
    """Check every account of ``user_id`` against its ledger.

    Accounts that drifted are logged at WARNING; the full report is returned.
    """

    report: list[BalanceDrift] = []
    for account in accounts.list_all(user_id=user_id):
        touching = transactions.list_for_account(account.id, user_id=user_id)
        expected = Decimal(str(account.opening_balance)) + ledger_delta(account.id, touching)
        row = BalanceDrift(
            account_id=account.id,
            account_name=account.name,
            stored=Decimal(str(account.balance)),
            expected=expected,
        )
        if not row.consistent:
            logger.warning(
                "Balance drift detected",
                extra={
                    "account_id": account.id,
                    "stored": str(row.stored),
                    "expected": str(row.expected),
                },
            )
        report.append(row)
    return report


def balance_history(
    account: Account,
    transactions: Iterable[Transaction],
    *,
    now: datetime,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """Running balance after each transaction dated up to ``now``.

    ``transactions`` must be every transaction touching the account. The
    stored balance includes future-dated entries, so those are backed out
    before the replay. Only entries inside ``[start, end]`` are reported.
    """

    ordered = sorted(transactions, key=lambda txn: (txn.occurred_at, txn.id or 0))
    past = [txn for txn in ordered if txn.occurred_at <= now]
    future = [txn for txn in ordered if txn.occurred_at > now]

    balance_now = Decimal(str(account.balance)) - ledger_delta(account.id, future)
    running = balance_now - ledger_delta(account.id, past)

    history: list[dict[str, Any]] = []
    for txn in past:
        running += effect_on(account.id, txn)
        if start is not None and txn.occurred_at < start:
            continue
        if end is not None and txn.occurred_at > end:
            continue
        history.append(
            {
                "date": txn.occurred_at.isoformat(),
                "balance": str(running),
                "transaction": {
                    "id": txn.id,
                    "description": txn.description,
                    "amount": str(txn.amount),
                    "type": txn.type,
                },
            }
        )
    return history
