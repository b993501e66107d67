"""Keep account balances in step with the transaction ledger.

Every create/update/delete is expressed as ``compute_deltas(old, new)``: the
inverse of the old transaction's effect plus the forward effect of the new
one, merged per account. The merged deltas and the transaction write share a
single database transaction, and each delta is an atomic SQL increment.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterator, Optional, Protocol

from sqlmodel import Session

from ..domain.repositories import AccountRepository, CategoryRepository, TransactionRepository
from ..errors import AccountNotFound, CategoryNotFound, InvalidTransition, TransactionNotFound
from ..infra.database import SessionFactory
from ..infra.repositories import (
    SQLModelAccountRepository,
    SQLModelCategoryRepository,
    SQLModelTransactionRepository,
)
from ..logging_config import get_logger
from ..models.transaction import Transaction, TransactionType

logger = get_logger("reconciler")

# Fields whose change can move money; everything else is descriptive.
LEDGER_FIELDS = ("amount", "type", "account_id", "transfer_account_id")
EDITABLE_FIELDS = frozenset(
    LEDGER_FIELDS + ("category_id", "occurred_at", "description", "payee", "notes")
)


class LedgerLike(Protocol):
    account_id: int
    transfer_account_id: Optional[int]
    category_id: Optional[int]
    amount: Any
    type: str


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """Immutable copy of the balance-relevant fields of a transaction."""

    account_id: int
    type: str
    amount: Decimal
    transfer_account_id: Optional[int] = None
    category_id: Optional[int] = None

    @classmethod
    def of(cls, txn: LedgerLike) -> "LedgerEntry":
        return cls(
            account_id=txn.account_id,
            type=str(getattr(txn.type, "value", txn.type)),
            amount=Decimal(str(txn.amount)),
            transfer_account_id=txn.transfer_account_id,
            category_id=txn.category_id,
        )


@dataclass(frozen=True, slots=True)
class BalanceDelta:
    """Signed amount to add to one account's balance."""

    account_id: int
    delta: Decimal


def forward_effects(entry: LedgerEntry) -> list[tuple[int, Decimal]]:
    """Balance changes caused by ``entry`` existing, source first."""

    if entry.type == TransactionType.INCOME.value:
        return [(entry.account_id, entry.amount)]
    if entry.type == TransactionType.EXPENSE.value:
        return [(entry.account_id, -entry.amount)]
    if entry.type == TransactionType.TRANSFER.value:
        if entry.transfer_account_id is None:
            raise InvalidTransition("Transfer requires a destination account")
        return [(entry.account_id, -entry.amount), (entry.transfer_account_id, entry.amount)]
    raise InvalidTransition(f"Unknown transaction type: {entry.type!r}")


def compute_deltas(
    old: Optional[LedgerEntry], new: Optional[LedgerEntry]
) -> list[BalanceDelta]:
    """Merge the reversal of ``old`` with the application of ``new``.

    Both sides are always evaluated; accounts whose net change is zero are
    dropped. Order is first appearance: old source, old destination, new
    source, new destination.
    """

    merged: dict[int, Decimal] = {}
    if old is not None:
        for account_id, amount in forward_effects(old):
            merged[account_id] = merged.get(account_id, Decimal("0")) - amount
    if new is not None:
        for account_id, amount in forward_effects(new):
            merged[account_id] = merged.get(account_id, Decimal("0")) + amount
    return [BalanceDelta(account_id, delta) for account_id, delta in merged.items() if delta != 0]


def validate_entry(entry: LedgerEntry) -> None:
    """Reject transaction shapes the ledger cannot represent."""

    if entry.type not in {t.value for t in TransactionType}:
        raise InvalidTransition(f"Unknown transaction type: {entry.type!r}")
    if entry.amount <= 0:
        raise InvalidTransition("Amount must be greater than zero")
    if entry.type == TransactionType.TRANSFER.value:
        if entry.transfer_account_id is None:
            raise InvalidTransition("Transfer requires a destination account")
        if entry.transfer_account_id == entry.account_id:
            raise InvalidTransition("Transfer destination must differ from the source account")
        if entry.category_id is not None:
            raise InvalidTransition("Transfers cannot carry a category")
    elif entry.transfer_account_id is not None:
        raise InvalidTransition("Only transfers may set a destination account")


class BalanceReconciler:
    """Transaction lifecycle operations that keep balances consistent."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        accounts: AccountRepository | None = None,
        transactions: TransactionRepository | None = None,
        categories: CategoryRepository | None = None,
    ):
        self.session_factory = session_factory
        self.accounts: AccountRepository = accounts or SQLModelAccountRepository(session_factory)
        self.transactions: TransactionRepository = (
            transactions or SQLModelTransactionRepository(session_factory)
        )
        self.categories: CategoryRepository = (
            categories or SQLModelCategoryRepository(session_factory)
        )

    def create(
        self, transaction: Transaction, *, user_id: int, session: Session | None = None
    ) -> Transaction:
        """Apply the forward deltas and persist ``transaction``.

        With ``session`` the work joins the caller's unit of work instead of
        committing on its own.
        """

        entry = LedgerEntry.of(transaction)
        validate_entry(entry)
        with self._unit(session) as active:
            self.check_references(entry, user_id=user_id, session=active)
            self._apply(compute_deltas(None, entry), user_id=user_id, session=active)
            transaction.user_id = user_id
            self.transactions.add(transaction, session=active)
            active.expunge(transaction)

        logger.info(
            "Transaction created",
            extra={"transaction_id": transaction.id, "user_id": user_id, "type": entry.type},
        )
        return transaction

    def update(self, transaction_id: int, *, user_id: int, **changes: Any) -> Transaction:
        """Revert the stored effect, apply the new one, then persist the changes."""

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        with self.session_factory() as session:
            stored = self.transactions.get_by_id(transaction_id, user_id=user_id, session=session)
            if stored is None:
                raise TransactionNotFound()

            before = LedgerEntry.of(stored)
            for key, value in changes.items():
                setattr(stored, key, value)
            after = LedgerEntry.of(stored)
            validate_entry(after)

            self.check_references(after, user_id=user_id, session=session)
            deltas = compute_deltas(before, after)
            self._apply(deltas, user_id=user_id, session=session)

            stored.updated_at = datetime.now(timezone.utc)
            session.add(stored)
            session.flush()
            session.refresh(stored)
            session.expunge(stored)

        logger.info(
            "Transaction updated",
            extra={
                "transaction_id": transaction_id,
                "user_id": user_id,
                "rebalanced_accounts": [d.account_id for d in deltas],
            },
        )
        return stored

    def delete(self, transaction_id: int, *, user_id: int) -> None:
        """Apply the inverse deltas and remove the transaction."""

        with self.session_factory() as session:
            stored = self.transactions.get_by_id(transaction_id, user_id=user_id, session=session)
            if stored is None:
                raise TransactionNotFound()
            self._apply(
                compute_deltas(LedgerEntry.of(stored), None), user_id=user_id, session=session
            )
            self.transactions.remove(stored, session=session)

        logger.info(
            "Transaction deleted", extra={"transaction_id": transaction_id, "user_id": user_id}
        )

    def check_references(self, entry: LedgerEntry, *, user_id: int, session: Session) -> None:
        """Raise unless every account and category in ``entry`` belongs to ``user_id``."""
        if not self.accounts.exists(entry.account_id, user_id=user_id, session=session):
            raise AccountNotFound("Account not found or doesn't belong to you")
        if entry.transfer_account_id is not None and not self.accounts.exists(
            entry.transfer_account_id, user_id=user_id, session=session
        ):
            raise AccountNotFound("Transfer account not found or doesn't belong to you")
        if entry.category_id is not None and not self.categories.exists(
            entry.category_id, user_id=user_id, session=session
        ):
            raise CategoryNotFound("Category not found or doesn't belong to you")

    @contextmanager
    def _unit(self, session: Session | None) -> Iterator[Session]:
        if session is not None:
            yield session
            return
        with self.session_factory() as own:
            yield own

    def _apply(self, deltas: list[BalanceDelta], *, user_id: int, session: Session) -> None:
        for item in deltas:
            self.accounts.apply_delta(item.account_id, item.delta, user_id=user_id, session=session)
