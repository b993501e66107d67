"""Recurring transaction templates."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class RecurringFrequency(str, Enum):
    """How often a recurring transaction falls due."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class RecurringTransaction(SQLModel, table=True):
    """Template from which ledger transactions are generated on request.

    Carries the same money-moving fields as ``Transaction``; ``next_due`` is
    the next occurrence on or after the last generation.
    """

    __tablename__: ClassVar[str] = "recurring_transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    account_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    transfer_account_id: Optional[int] = Field(default=None, foreign_key="account.id")
    category_id: Optional[int] = Field(default=None, foreign_key="category.id")
    amount: Decimal = Field(max_digits=14, decimal_places=2)
    type: str = Field(nullable=False, max_length=16, index=True)
    description: str = Field(nullable=False, max_length=255)
    payee: str = Field(default="", max_length=128)
    notes: str = Field(default="", max_length=500)
    frequency: str = Field(default=RecurringFrequency.MONTHLY.value, nullable=False, max_length=16)
    start_date: datetime = Field(nullable=False)
    end_date: Optional[datetime] = Field(default=None)
    last_processed: Optional[datetime] = Field(default=None)
    next_due: Optional[datetime] = Field(default=None, index=True)
    is_active: bool = Field(default=True, nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
