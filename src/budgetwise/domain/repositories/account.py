"""Account repository protocol."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Protocol

from sqlmodel import Session

from ...models.account import Account


class AccountRepository(Protocol):
    """Repository for managing account entities."""

    def get_by_id(
        self, account_id: int, *, user_id: int, session: Session | None = None
    ) -> Optional[Account]:
        """Retrieve an account owned by ``user_id``."""
        ...

    def exists(self, account_id: int, *, user_id: int, session: Session | None = None) -> bool:
        """Return True when the account exists and belongs to ``user_id``."""
        ...

    def list_all(self, *, user_id: int) -> list[Account]:
        """List all accounts for a user."""
        ...

    def create(self, account: Account, *, user_id: int) -> Account:
        """Create a new account; its balance becomes the opening balance."""
        ...

    def update_details(self, account_id: int, *, user_id: int, **fields: Any) -> Account:
        """Update descriptive fields. Never touches the balance."""
        ...

    def delete(self, account_id: int, *, user_id: int) -> None:
        """Delete an account that no transaction references."""
        ...

    def apply_delta(
        self, account_id: int, delta: Decimal, *, user_id: int, session: Session
    ) -> None:
        """Atomically add ``delta`` to the stored balance."""
        ...
