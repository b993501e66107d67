"""Budget repository protocol."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from ...models.budget import Budget


class BudgetRepository(Protocol):
    """Repository for managing budget entities."""

    def get_by_id(self, budget_id: int, *, user_id: int) -> Optional[Budget]:
        """Retrieve a budget by ID."""
        ...

    def list_all(self, *, user_id: int, is_active: Optional[bool] = None) -> list[Budget]:
        """List budgets, optionally filtered by the active flag."""
        ...

    def create(self, budget: Budget, *, user_id: int) -> Budget:
        """Create a new budget."""
        ...

    def update(self, budget_id: int, *, user_id: int, **fields: Any) -> Budget:
        """Update an existing budget."""
        ...

    def delete(self, budget_id: int, *, user_id: int) -> None:
        """Delete a budget by ID."""
        ...
