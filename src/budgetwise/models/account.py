"""Account model carrying the authoritative running balance."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class AccountType(str, Enum):
    """Supported account kinds."""

    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"
    INVESTMENT = "investment"
    LOAN = "loan"
    CASH = "cash"
    OTHER = "other"


class Account(SQLModel, table=True):
    """A user-owned account.

    ``balance`` is only written at creation; afterwards it moves exclusively
    through ``AccountRepository.apply_delta``. ``opening_balance`` keeps the
    creation value so the ledger invariant can be audited.
    """

    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    account_type: str = Field(default=AccountType.CHECKING.value, nullable=False, max_length=16)
    balance: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    opening_balance: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    currency: str = Field(default="USD", max_length=3)
    include_in_net_worth: bool = Field(default=True, nullable=False)
    is_active: bool = Field(default=True, nullable=False)
    institution: str = Field(default="", max_length=128)
    notes: str = Field(default="", max_length=500)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
