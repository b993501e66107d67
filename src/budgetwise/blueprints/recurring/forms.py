"""Recurring transaction payload definitions.

Transfer and category rules are checked by the reconciler's shape
validation, exactly as for one-off transactions.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ...clock import to_wall_clock
from ...models.recurring import RecurringFrequency
from ...models.transaction import TransactionType
from ..common import form_zone


def _convert(value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
    return to_wall_clock(value, form_zone(info)) if value is not None else None


class RecurringForm(BaseModel):
    """Payload for creating a recurring transaction template."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    account_id: int
    transfer_account_id: Optional[int] = None
    category_id: Optional[int] = None
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    type: TransactionType
    description: str = Field(min_length=1, max_length=255)
    payee: str = Field(default="", max_length=128)
    notes: str = Field(default="", max_length=500)
    frequency: RecurringFrequency
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool = True

    @field_validator("start_date", "end_date")
    @classmethod
    def convert_dates(cls, value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return _convert(value, info)


class RecurringUpdateForm(BaseModel):
    """Partial edit; explicit nulls clear optional references and the end date."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    account_id: Optional[int] = None
    transfer_account_id: Optional[int] = None
    category_id: Optional[int] = None
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=14, decimal_places=2)
    type: Optional[TransactionType] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    payee: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None, max_length=500)
    frequency: Optional[RecurringFrequency] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def convert_dates(cls, value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return _convert(value, info)

    def changes(self) -> dict[str, Any]:
        clearable = {"transfer_account_id", "category_id", "end_date"}
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in clearable
        }


__all__ = ["RecurringForm", "RecurringUpdateForm"]
