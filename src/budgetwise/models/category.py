"""Ledger category definitions."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Category(SQLModel, table=True):
    """Transaction category used for budgeting.

    Seeded defaults (``is_default``) keep their name and type and cannot be
    deleted; only their colour and icon may change.
    """

    __tablename__: ClassVar[str] = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(index=True, nullable=False, max_length=64)
    category_type: str = Field(default=CategoryType.EXPENSE.value, nullable=False, max_length=16)
    color: Optional[str] = Field(default=None, max_length=7)
    icon: str = Field(default="", max_length=64)
    is_default: bool = Field(default=False, nullable=False)
