"""SQLModel implementation of Account repository."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import func, or_, update
from sqlmodel import Session, select

from ...errors import AccountInUse, AccountNotFound
from ...logging_config import get_logger
from ...models.account import Account
from ...models.recurring import RecurringTransaction
from ...models.transaction import Transaction
from .base import SessionBoundRepository

logger = get_logger("repositories.account")

# Fields an owner may edit after creation; balance is deliberately absent.
UPDATABLE_FIELDS = frozenset(
    {"name", "account_type", "currency", "include_in_net_worth", "is_active", "institution", "notes"}
)


class SQLModelAccountRepository(SessionBoundRepository):
    """SQLModel-based account repository implementation."""

    def get_by_id(
        self, account_id: int, *, user_id: int, session: Session | None = None
    ) -> Optional[Account]:
        """Retrieve an account owned by ``user_id``."""
        with self._session(session) as active:
            obj = active.exec(
                select(Account).where(Account.id == account_id, Account.user_id == user_id)
            ).first()
            if obj and session is None:
                active.expunge(obj)
            return obj

    def exists(self, account_id: int, *, user_id: int, session: Session | None = None) -> bool:
        """Return True when the account exists and belongs to ``user_id``."""
        with self._session(session) as active:
            found = active.exec(
                select(Account.id).where(Account.id == account_id, Account.user_id == user_id)
            ).first()
            return found is not None

    def list_all(self, *, user_id: int) -> list[Account]:
        """List all accounts."""
        with self._session() as session:
            statement = (
                select(Account)
                .where(Account.user_id == user_id)
                .order_by(Account.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, account: Account, *, user_id: int) -> Account:
        """Create a new account; the initial balance is recorded as the opening balance."""
        with self._session() as session:
            account.user_id = user_id
            account.opening_balance = account.balance
            session.add(account)
            session.flush()
            session.refresh(account)
            session.expunge(account)
            return account

    def update_details(self, account_id: int, *, user_id: int, **fields: Any) -> Account:
        """Update descriptive fields. Never touches the balance."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        with self._session() as session:
            account = self.get_by_id(account_id, user_id=user_id, session=session)
            if account is None:
                raise AccountNotFound()
            for key, value in fields.items():
                setattr(account, key, value)
            account.updated_at = datetime.now(timezone.utc)
            session.add(account)
            session.flush()
            session.refresh(account)
            session.expunge(account)
            return account

    def delete(self, account_id: int, *, user_id: int) -> None:
        """Delete an account by ID, refusing while transactions or templates reference it."""
        with self._session() as session:
            account = self.get_by_id(account_id, user_id=user_id, session=session)
            if account is None:
                raise AccountNotFound()
            referencing = session.exec(
                select(func.count(Transaction.id)).where(
                    or_(
                        Transaction.account_id == account_id,
                        Transaction.transfer_account_id == account_id,
                    )
                )
            ).one()
            if referencing:
                raise AccountInUse()
            templates = session.exec(
                select(func.count(RecurringTransaction.id)).where(
                    or_(
                        RecurringTransaction.account_id == account_id,
                        RecurringTransaction.transfer_account_id == account_id,
                    )
                )
            ).one()
            if templates:
                raise AccountInUse("Cannot delete account with associated recurring transactions")
            session.delete(account)

    def apply_delta(
        self, account_id: int, delta: Decimal, *, user_id: int, session: Session
    ) -> None:
        """Atomically add ``delta`` to the stored balance.

        A single ``UPDATE ... SET balance = balance + :delta`` so concurrent
        writers never lose an increment.
        """
        statement = (
            update(Account)
            .where(Account.id == account_id, Account.user_id == user_id)  # type: ignore[arg-type]
            .values(
                balance=Account.balance + delta,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        result = session.exec(statement)  # type: ignore[call-overload]
        if result.rowcount != 1:
            raise AccountNotFound()
        logger.debug("Applied balance delta", extra={"account_id": account_id, "delta": str(delta)})
