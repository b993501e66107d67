"""Recurring transaction repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from sqlmodel import Session

from ...models.recurring import RecurringTransaction


class RecurringTransactionRepository(Protocol):
    """Repository for recurring transaction templates."""

    def get_by_id(
        self, recurring_id: int, *, user_id: int, session: Session | None = None
    ) -> Optional[RecurringTransaction]:
        """Retrieve a template owned by ``user_id``."""
        ...

    def list_all(
        self,
        *,
        user_id: int,
        is_active: Optional[bool] = None,
        txn_type: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> list[RecurringTransaction]:
        """List templates, soonest due first."""
        ...

    def add(self, template: RecurringTransaction, *, session: Session) -> RecurringTransaction:
        """Insert a template inside the caller's unit of work."""
        ...

    def delete(self, recurring_id: int, *, user_id: int) -> None:
        """Delete a template; generated transactions are kept."""
        ...
