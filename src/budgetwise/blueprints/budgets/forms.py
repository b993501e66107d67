"""Budget form definitions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from ...clock import to_wall_clock, wall_clock_now
from ...models.budget import BudgetPeriod
from ..common import form_zone


class BudgetForm(BaseModel):
    """Payload for creating a budget, also used to re-check merged edits."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    name: str = Field(min_length=1, max_length=128)
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2, description="Spending limit")
    period: BudgetPeriod = Field(default=BudgetPeriod.MONTHLY)
    start_date: Optional[datetime] = Field(default=None, validate_default=True)
    end_date: Optional[datetime] = None
    category_id: Optional[int] = Field(default=None, description="Omit to cover every expense")
    is_active: bool = True
    notification_threshold: int = Field(default=80, ge=0, le=100)
    notes: str = Field(default="", max_length=500)

    @field_validator("start_date")
    @classmethod
    def default_start(cls, value: Optional[datetime], info: ValidationInfo) -> datetime:
        """Start of today unless given; offsets are converted to the app's wall clock."""

        zone = form_zone(info)
        if value is None:
            return wall_clock_now(zone).replace(hour=0, minute=0, second=0, microsecond=0)
        return to_wall_clock(value, zone)

    @field_validator("end_date")
    @classmethod
    def convert_end(cls, value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return to_wall_clock(value, form_zone(info)) if value is not None else None

    @model_validator(mode="after")
    def check_window(self) -> "BudgetForm":
        """Custom budgets need an end date, and no budget may end before it starts."""

        if self.period == BudgetPeriod.CUSTOM.value and self.end_date is None:
            raise ValueError("Custom budgets require an end date.")
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date cannot be before the start date.")
        return self


class BudgetUpdateForm(BaseModel):
    """Partial edit; the merged result is validated with ``BudgetForm``."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=14, decimal_places=2)
    period: Optional[BudgetPeriod] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    category_id: Optional[int] = None
    is_active: Optional[bool] = None
    notification_threshold: Optional[int] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("start_date", "end_date")
    @classmethod
    def convert_dates(cls, value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return to_wall_clock(value, form_zone(info)) if value is not None else None

    def changes(self) -> dict[str, Any]:
        """Fields the caller sent; ``end_date`` and ``category_id`` may be cleared."""

        clearable = {"end_date", "category_id"}
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in clearable
        }


__all__ = ["BudgetForm", "BudgetUpdateForm"]
