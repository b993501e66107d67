"""Budgeting tables."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class BudgetPeriod(str, Enum):
    """Recurring window a budget limit applies to."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


class Budget(SQLModel, table=True):
    """A spending limit over a recurring period.

    Progress is derived from transactions on every request; nothing about
    spending is stored here.
    """

    __tablename__: ClassVar[str] = "budget"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    amount: Decimal = Field(max_digits=14, decimal_places=2)
    period: str = Field(default=BudgetPeriod.MONTHLY.value, nullable=False, max_length=16)
    start_date: datetime = Field(nullable=False)
    end_date: Optional[datetime] = Field(default=None)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id")
    is_active: bool = Field(default=True, nullable=False, index=True)
    notification_threshold: int = Field(default=80, nullable=False)
    notes: str = Field(default="", max_length=500)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
