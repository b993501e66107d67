"""Category form definitions."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...models.category import CategoryType

_HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CategoryForm(BaseModel):
    """Payload for creating a category."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    name: str = Field(min_length=1, max_length=64)
    category_type: CategoryType = Field(default=CategoryType.EXPENSE)
    color: Optional[str] = Field(default=None, pattern=_HEX_COLOR)
    icon: str = Field(default="", max_length=64)


class CategoryUpdateForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=64)
    category_type: Optional[CategoryType] = None
    color: Optional[str] = Field(default=None, pattern=_HEX_COLOR)
    icon: Optional[str] = Field(default=None, max_length=64)

    def changes(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


__all__ = ["CategoryForm", "CategoryUpdateForm"]
