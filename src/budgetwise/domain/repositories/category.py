"""Category repository protocol."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from sqlmodel import Session

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing category entities."""

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        ...

    def get_by_name(self, name: str, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by name."""
        ...

    def exists(self, category_id: int, *, user_id: int, session: Session | None = None) -> bool:
        """Return True when the category exists and belongs to ``user_id``."""
        ...

    def list_all(self, *, user_id: int, category_type: Optional[str] = None) -> list[Category]:
        """List categories, optionally of one type."""
        ...

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        ...

    def update(self, category_id: int, *, user_id: int, **fields: Any) -> Category:
        """Update a category."""
        ...

    def delete(self, category_id: int, *, user_id: int) -> None:
        """Delete a category that nothing references."""
        ...
