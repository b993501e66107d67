"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class TransactionType(str, Enum):
    """How a transaction moves money."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class Transaction(SQLModel, table=True):
    """A single ledger transaction.

    ``amount`` is always positive; the sign of its effect on balances comes
    from ``type``. Transfers carry ``transfer_account_id`` and no category.
    """

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    account_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    transfer_account_id: Optional[int] = Field(default=None, foreign_key="account.id", index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    recurring_id: Optional[int] = Field(
        default=None, foreign_key="recurring_transaction.id", index=True
    )
    amount: Decimal = Field(max_digits=14, decimal_places=2)
    type: str = Field(nullable=False, max_length=16, index=True)
    occurred_at: datetime = Field(nullable=False, index=True)
    description: str = Field(nullable=False, max_length=255)
    payee: str = Field(default="", max_length=128)
    notes: str = Field(default="", max_length=500)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
