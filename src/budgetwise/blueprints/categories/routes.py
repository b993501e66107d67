"""Category routes."""

from __future__ import annotations

from typing import Any, Optional

from flask import request

from ...errors import CategoryNotFound, PayloadInvalid
from ...extensions import get_session_factory
from ...infra.repositories import SQLModelCategoryRepository
from ...logging_config import get_logger
from ...models.category import Category, CategoryType
from ..common import current_user_id, parse_body, success
from . import bp
from .forms import CategoryForm, CategoryUpdateForm

logger = get_logger("categories")


def _repository() -> SQLModelCategoryRepository:
    return SQLModelCategoryRepository(get_session_factory())


def _type_filter() -> Optional[str]:
    value = request.args.get("type")
    if not value:
        return None
    if value not in {t.value for t in CategoryType}:
        raise PayloadInvalid(errors={"type": ["Expected income or expense"]})
    return value


def serialize_category(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "type": category.category_type,
        "color": category.color,
        "icon": category.icon,
        "isDefault": category.is_default,
    }


@bp.post("")
def create_category():
    user_id = current_user_id()
    form = parse_body(CategoryForm)
    category = _repository().create(Category(**form.model_dump()), user_id=user_id)
    logger.info("Category created", extra={"category_id": category.id, "user_id": user_id})
    return success(
        201, message="Category created successfully", category=serialize_category(category)
    )


@bp.get("")
def list_categories():
    """List the caller's categories by name, optionally of one type."""

    categories = _repository().list_all(user_id=current_user_id(), category_type=_type_filter())
    return success(count=len(categories), categories=[serialize_category(c) for c in categories])


@bp.get("/<int:category_id>")
def get_category(category_id: int):
    category = _repository().get_by_id(category_id, user_id=current_user_id())
    if category is None:
        raise CategoryNotFound()
    return success(category=serialize_category(category))


@bp.put("/<int:category_id>")
def update_category(category_id: int):
    """Edit a category; defaults only accept colour and icon changes."""

    user_id = current_user_id()
    form = parse_body(CategoryUpdateForm)
    category = _repository().update(category_id, user_id=user_id, **form.changes())
    return success(message="Category updated successfully", category=serialize_category(category))


@bp.delete("/<int:category_id>")
def delete_category(category_id: int):
    """Delete a custom category no transaction, budget or template uses."""

    user_id = current_user_id()
    _repository().delete(category_id, user_id=user_id)
    logger.info("Category deleted", extra={"category_id": category_id, "user_id": user_id})
    return success(message="Category deleted successfully")
