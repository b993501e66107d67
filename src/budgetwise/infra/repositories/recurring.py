"""SQLModel implementation of the recurring transaction repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from ...errors import RecurringNotFound
from ...models.recurring import RecurringTransaction
from ...models.transaction import Transaction
from .base import SessionBoundRepository


class SQLModelRecurringRepository(SessionBoundRepository):
    """SQLModel-based recurring transaction repository implementation."""

    def get_by_id(
        self, recurring_id: int, *, user_id: int, session: Session | None = None
    ) -> Optional[RecurringTransaction]:
        """Retrieve a template owned by ``user_id``."""
        with self._session(session) as active:
            obj = active.exec(
                select(RecurringTransaction).where(
                    RecurringTransaction.id == recurring_id,
                    RecurringTransaction.user_id == user_id,
                )
            ).first()
            if obj and session is None:
                active.expunge(obj)
            return obj

    def list_all(
        self,
        *,
        user_id: int,
        is_active: Optional[bool] = None,
        txn_type: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> list[RecurringTransaction]:
        """List templates, soonest due first."""
        with self._session() as session:
            statement = select(RecurringTransaction).where(RecurringTransaction.user_id == user_id)
            if is_active is not None:
                statement = statement.where(RecurringTransaction.is_active == is_active)
            if txn_type:
                statement = statement.where(RecurringTransaction.type == txn_type)
            if account_id is not None:
                statement = statement.where(RecurringTransaction.account_id == account_id)
            statement = statement.order_by(
                RecurringTransaction.next_due, RecurringTransaction.id  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def add(self, template: RecurringTransaction, *, session: Session) -> RecurringTransaction:
        """Insert a template inside the caller's unit of work."""
        session.add(template)
        session.flush()
        session.refresh(template)
        return template

    def delete(self, recurring_id: int, *, user_id: int) -> None:
        """Delete a template; transactions generated from it are detached, not removed."""
        with self._session() as session:
            template = self.get_by_id(recurring_id, user_id=user_id, session=session)
            if template is None:
                raise RecurringNotFound()
            session.exec(  # type: ignore[call-overload]
                update(Transaction)
                .where(Transaction.recurring_id == recurring_id)  # type: ignore[arg-type]
                .values(recurring_id=None)
                .execution_options(synchronize_session=False)
            )
            session.delete(template)
