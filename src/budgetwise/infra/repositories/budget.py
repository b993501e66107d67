"""SQLModel implementation of Budget repository."""

from __future__ import annotations

from typing import Any, Optional

from sqlmodel import select

from ...errors import BudgetNotFound
from ...models.budget import Budget
from .base import SessionBoundRepository


class SQLModelBudgetRepository(SessionBoundRepository):
    """SQLModel-based budget repository implementation."""

    def get_by_id(self, budget_id: int, *, user_id: int) -> Optional[Budget]:
        """Retrieve a budget by ID."""
        with self._session() as session:
            obj = session.exec(
                select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, is_active: Optional[bool] = None) -> list[Budget]:
        """List budgets, newest start date first."""
        with self._session() as session:
            statement = select(Budget).where(Budget.user_id == user_id)
            if is_active is not None:
                statement = statement.where(Budget.is_active == is_active)
            statement = statement.order_by(Budget.start_date.desc())  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, budget: Budget, *, user_id: int) -> Budget:
        """Create a new budget."""
        with self._session() as session:
            budget.user_id = user_id
            session.add(budget)
            session.flush()
            session.refresh(budget)
            session.expunge(budget)
            return budget

    def update(self, budget_id: int, *, user_id: int, **fields: Any) -> Budget:
        """Update an existing budget."""
        with self._session() as session:
            budget = session.exec(
                select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
            ).first()
            if budget is None:
                raise BudgetNotFound()
            for key, value in fields.items():
                setattr(budget, key, value)
            session.add(budget)
            session.flush()
            session.refresh(budget)
            session.expunge(budget)
            return budget

    def delete(self, budget_id: int, *, user_id: int) -> None:
        """Delete a budget by ID."""
        with self._session() as session:
            budget = session.exec(
                select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
            ).first()
            if budget is None:
                raise BudgetNotFound()
            session.delete(budget)
