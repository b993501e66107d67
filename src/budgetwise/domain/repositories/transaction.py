"""Transaction repository protocol."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from sqlmodel import Session

from ...models.transaction import Transaction


@dataclass(frozen=True, slots=True)
class ExpenseTotals:
    """Sum and count of matching expense transactions."""

    total: Decimal
    count: int


class TransactionRepository(Protocol):
    """Repository for managing transaction entities."""

    def get_by_id(
        self, transaction_id: int, *, user_id: int, session: Session | None = None
    ) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

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
        """Filtered, paginated listing plus total match count."""
        ...

    def list_for_account(
        self,
        account_id: int,
        *,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Transaction]:
        """Transactions touching the account as source or destination, oldest first."""
        ...

    def sum_expenses(
        self,
        *,
        user_id: int,
        category_id: Optional[int],
        start: datetime,
        end: datetime,
    ) -> ExpenseTotals:
        """Sum expense transactions dated within ``[start, end]``."""
        ...

    def add(self, transaction: Transaction, *, session: Session) -> Transaction:
        """Insert a transaction inside the caller's unit of work."""
        ...

    def remove(self, transaction: Transaction, *, session: Session) -> None:
        """Delete a transaction inside the caller's unit of work."""
        ...
