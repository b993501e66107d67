"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...errors import CategoryInUse, CategoryLocked, CategoryNotFound
from ...models.budget import Budget
from ...models.category import Category
from ...models.recurring import RecurringTransaction
from ...models.transaction import Transaction
from .base import SessionBoundRepository

UPDATABLE_FIELDS = frozenset({"name", "category_type", "color", "icon"})
# Seeded defaults only let owners recolour or re-icon them.
LOCKED_FIELDS = frozenset({"name", "category_type"})
_REFERENCING = (
    (Transaction, "transactions"),
    (Budget, "budgets"),
    (RecurringTransaction, "recurring transactions"),
)


class SQLModelCategoryRepository(SessionBoundRepository):
    """SQLModel-based category repository implementation."""

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        with self._session() as session:
            obj = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by name."""
        with self._session() as session:
            obj = session.exec(
                select(Category).where(Category.name == name, Category.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, category_type: Optional[str] = None) -> list[Category]:
        """List categories by name, optionally of one type."""
        with self._session() as session:
            statement = select(Category).where(Category.user_id == user_id)
            if category_type is not None:
                statement = statement.where(Category.category_type == category_type)
            statement = statement.order_by(Category.name)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        with self._session() as session:
            category.user_id = user_id
            session.add(category)
            session.flush()
            session.refresh(category)
            session.expunge(category)
            return category

    def update(self, category_id: int, *, user_id: int, **fields: Any) -> Category:
        """Update a category; defaults refuse changes to name and type."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        with self._session() as session:
            category = self._load(session, category_id, user_id=user_id)
            if category.is_default and LOCKED_FIELDS & set(fields):
                raise CategoryLocked()
            for key, value in fields.items():
                setattr(category, key, value)
            session.add(category)
            session.flush()
            session.refresh(category)
            session.expunge(category)
            return category

    def delete(self, category_id: int, *, user_id: int) -> None:
        """Delete a category nothing references; defaults are never deleted."""
        with self._session() as session:
            category = self._load(session, category_id, user_id=user_id)
            if category.is_default:
                raise CategoryLocked("Cannot delete default categories")
            for model, label in _REFERENCING:
                count = session.exec(
                    select(func.count(model.id)).where(model.category_id == category_id)
                ).one()
                if count:
                    raise CategoryInUse(
                        f"Cannot delete category with associated {label}"
                    )
            session.delete(category)

    def exists(self, category_id: int, *, user_id: int, session: Session | None = None) -> bool:
        """Return True when the category exists and belongs to ``user_id``."""
        with self._session(session) as active:
            found = active.exec(
                select(Category.id).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            return found is not None

    @staticmethod
    def _load(session: Session, category_id: int, *, user_id: int) -> Category:
        category = session.exec(
            select(Category).where(Category.id == category_id, Category.user_id == user_id)
        ).first()
        if category is None:
            raise CategoryNotFound()
        return category
