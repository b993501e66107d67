"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ...domain.repositories.transaction import ExpenseTotals
from ...models.transaction import Transaction, TransactionType
from .base import SessionBoundRepository


class SQLModelTransactionRepository(SessionBoundRepository):
    """SQLModel-based transaction repository implementation."""

    def get_by_id(
        self, transaction_id: int, *, user_id: int, session: Session | None = None
    ) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self._session(session) as active:
            obj = active.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj and session is None:
                active.expunge(obj)
            return obj

    def search(
        self,
        *,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        txn_type: Optional[str] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        text: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Transaction], int]:
        """Advanced search with multiple filters; returns (page, total)."""
        conditions = [Transaction.user_id == user_id]
        if start_date:
            conditions.append(Transaction.occurred_at >= start_date)
        if end_date:
            conditions.append(Transaction.occurred_at <= end_date)
        if txn_type:
            conditions.append(Transaction.type == txn_type)
        if account_id:
            conditions.append(
                or_(
                    Transaction.account_id == account_id,
                    Transaction.transfer_account_id == account_id,
                )
            )
        if category_id:
            conditions.append(Transaction.category_id == category_id)
        if text:
            pattern = f"%{text}%"
            conditions.append(
                or_(
                    Transaction.description.ilike(pattern),  # type: ignore[attr-defined]
                    Transaction.payee.ilike(pattern),  # type: ignore[attr-defined]
                )
            )

        with self._session() as session:
            total = session.exec(select(func.count(Transaction.id)).where(*conditions)).one()
            statement = (
                select(Transaction)
                .where(*conditions)
                .order_by(Transaction.occurred_at.desc(), Transaction.id.desc())  # type: ignore
                .offset(offset)
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows, int(total)

    def list_for_account(
        self,
        account_id: int,
        *,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Transaction]:
        """Transactions touching the account as source or destination, oldest first."""
        with self._session() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(
                    or_(
                        Transaction.account_id == account_id,
                        Transaction.transfer_account_id == account_id,
                    )
                )
            )
            if start_date:
                statement = statement.where(Transaction.occurred_at >= start_date)
            if end_date:
                statement = statement.where(Transaction.occurred_at <= end_date)
            statement = statement.order_by(Transaction.occurred_at, Transaction.id)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def sum_expenses(
        self,
        *,
        user_id: int,
        category_id: Optional[int],
        start: datetime,
        end: datetime,
    ) -> ExpenseTotals:
        """Sum expense transactions dated within ``[start, end]``.

        ``category_id=None`` aggregates across every expense category.
        """
        statement = (
            select(func.sum(Transaction.amount), func.count(Transaction.id))
            .where(Transaction.user_id == user_id)
            .where(Transaction.type == TransactionType.EXPENSE.value)
            .where(Transaction.occurred_at >= start)
            .where(Transaction.occurred_at <= end)
        )
        if category_id is not None:
            statement = statement.where(Transaction.category_id == category_id)

        with self._session() as session:
            total, count = session.exec(statement).one()
        return ExpenseTotals(
            total=Decimal(str(total)) if total is not None else Decimal("0"),
            count=int(count or 0),
        )

    def add(self, transaction: Transaction, *, session: Session) -> Transaction:
        """Insert a transaction inside the caller's unit of work."""
        session.add(transaction)
        session.flush()
        session.refresh(transaction)
        return transaction

    def remove(self, transaction: Transaction, *, session: Session) -> None:
        """Delete a transaction inside the caller's unit of work."""
        session.delete(transaction)
        session.flush()
