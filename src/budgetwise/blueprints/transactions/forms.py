"""Transaction payload definitions.

Shape rules tying ``type`` to ``transfer_account_id`` and ``category_id`` are
enforced by the reconciler, which sees the merged state on updates.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ...clock import to_wall_clock, wall_clock_now
from ...models.transaction import TransactionType
from ..common import form_zone


class TransactionForm(BaseModel):
    """Payload for recording a transaction."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    account_id: int = Field(description="Source account")
    transfer_account_id: Optional[int] = Field(default=None, description="Transfer destination")
    category_id: Optional[int] = None
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    type: TransactionType
    occurred_at: Optional[datetime] = Field(default=None, validate_default=True)
    description: str = Field(max_length=255)
    payee: str = Field(default="", max_length=128)
    notes: str = Field(default="", max_length=500)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        """Require a non-blank description."""

        if not value:
            raise ValueError("Please provide a description.")
        return value

    @field_validator("occurred_at")
    @classmethod
    def validate_occurred_at(cls, value: Optional[datetime], info: ValidationInfo) -> datetime:
        """Default to now; convert offset timestamps to the app's wall clock."""

        if value is None:
            return wall_clock_now(form_zone(info))
        return to_wall_clock(value, form_zone(info))


class TransactionUpdateForm(BaseModel):
    """Partial edit; explicit nulls clear optional references."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    account_id: Optional[int] = None
    transfer_account_id: Optional[int] = None
    category_id: Optional[int] = None
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=14, decimal_places=2)
    type: Optional[TransactionType] = None
    occurred_at: Optional[datetime] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    payee: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("occurred_at")
    @classmethod
    def validate_occurred_at(
        cls, value: Optional[datetime], info: ValidationInfo
    ) -> Optional[datetime]:
        return to_wall_clock(value, form_zone(info)) if value is not None else None

    def changes(self) -> dict[str, Any]:
        """Fields the caller sent; nulls are kept only for clearable references."""

        clearable = {"transfer_account_id", "category_id"}
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in clearable
        }


__all__ = ["TransactionForm", "TransactionUpdateForm"]
