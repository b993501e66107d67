"""Account payload definitions."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...models.account import AccountType


class AccountForm(BaseModel):
    """Payload for opening an account."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    name: str = Field(description="Display name", min_length=1, max_length=128)
    account_type: AccountType = Field(default=AccountType.CHECKING, description="Kind of account")
    balance: Decimal = Field(
        default=Decimal("0"),
        max_digits=14,
        decimal_places=2,
        description="Initial balance; later changes come only from transactions",
    )
    currency: str = Field(default="USD", min_length=3, max_length=3)
    include_in_net_worth: bool = True
    institution: str = Field(default="", max_length=128)
    notes: str = Field(default="", max_length=500)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: str) -> str:
        """Store ISO-4217 codes upper-case."""

        return value.upper()


class AccountUpdateForm(BaseModel):
    """Descriptive edits. ``balance`` is not accepted here."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    account_type: Optional[AccountType] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    include_in_net_worth: Optional[bool] = None
    is_active: Optional[bool] = None
    institution: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if value else value

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually sent, minus explicit nulls."""

        return {key: value for key, value in self.model_dump(exclude_unset=True).items() if value is not None}


__all__ = ["AccountForm", "AccountUpdateForm"]
