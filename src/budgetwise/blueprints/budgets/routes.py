"""Budget routes and progress endpoints."""

from __future__ import annotations

from typing import Any

from flask import current_app

from ...errors import BudgetNotFound, CategoryNotFound
from ...extensions import get_session_factory
from ...infra.repositories import (
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelTransactionRepository,
)
from ...logging_config import get_logger
from ...models.budget import Budget
from ...services.budgeting import compute_progress, progress_for_budgets
from ..common import current_user_id, iso, local_now, money, parse_body, success
from . import bp
from .forms import BudgetForm, BudgetUpdateForm

logger = get_logger("budgets")

_FORM_FIELDS = tuple(BudgetForm.model_fields)


def _repository() -> SQLModelBudgetRepository:
    return SQLModelBudgetRepository(get_session_factory())


def _ensure_category(category_id: int | None, *, user_id: int) -> None:
    if category_id is None:
        return
    if not SQLModelCategoryRepository(get_session_factory()).exists(category_id, user_id=user_id):
        raise CategoryNotFound("Category not found or doesn't belong to you")


def _load(budget_id: int, *, user_id: int) -> Budget:
    budget = _repository().get_by_id(budget_id, user_id=user_id)
    if budget is None:
        raise BudgetNotFound()
    return budget


def serialize_budget(budget: Budget) -> dict[str, Any]:
    return {
        "id": budget.id,
        "name": budget.name,
        "amount": money(budget.amount),
        "period": budget.period,
        "startDate": iso(budget.start_date),
        "endDate": iso(budget.end_date),
        "categoryId": budget.category_id,
        "isActive": budget.is_active,
        "notificationThreshold": budget.notification_threshold,
        "notes": budget.notes,
        "createdAt": iso(budget.created_at),
    }


@bp.post("")
def create_budget():
    user_id = current_user_id()
    form = parse_body(BudgetForm)
    _ensure_category(form.category_id, user_id=user_id)
    budget = _repository().create(Budget(**form.model_dump()), user_id=user_id)
    logger.info("Budget created", extra={"budget_id": budget.id, "user_id": user_id})
    return success(201, message="Budget created successfully", budget=serialize_budget(budget))


@bp.get("")
def list_budgets():
    budgets = _repository().list_all(user_id=current_user_id())
    return success(count=len(budgets), budgets=[serialize_budget(b) for b in budgets])


@bp.get("/<int:budget_id>")
def get_budget(budget_id: int):
    return success(budget=serialize_budget(_load(budget_id, user_id=current_user_id())))


@bp.put("/<int:budget_id>")
def update_budget(budget_id: int):
    """Partial edit, re-validated against the stored budget."""

    user_id = current_user_id()
    changes = parse_body(BudgetUpdateForm).changes()
    stored = _load(budget_id, user_id=user_id)

    merged = {field: getattr(stored, field) for field in _FORM_FIELDS}
    merged.update(changes)
    BudgetForm.model_validate(merged)
    if "category_id" in changes:
        _ensure_category(changes["category_id"], user_id=user_id)

    budget = _repository().update(budget_id, user_id=user_id, **changes)
    return success(message="Budget updated successfully", budget=serialize_budget(budget))


@bp.delete("/<int:budget_id>")
def delete_budget(budget_id: int):
    _repository().delete(budget_id, user_id=current_user_id())
    return success(message="Budget deleted successfully")


@bp.get("/<int:budget_id>/progress")
def budget_progress(budget_id: int):
    """Spending snapshot for the period containing now."""

    user_id = current_user_id()
    budget = _load(budget_id, user_id=user_id)
    progress = compute_progress(
        budget,
        user_id=user_id,
        transactions=SQLModelTransactionRepository(get_session_factory()),
        now=local_now(),
        week_start=current_app.config["WEEK_START"],
    )
    return success(budget=serialize_budget(budget), progress=progress.to_dict())


@bp.get("/progress/all")
def all_budgets_progress():
    """Progress for every active budget, evaluated against one ``now``."""

    user_id = current_user_id()
    pairs = progress_for_budgets(
        _repository().list_all(user_id=user_id, is_active=True),
        user_id=user_id,
        transactions=SQLModelTransactionRepository(get_session_factory()),
        now=local_now(),
        week_start=current_app.config["WEEK_START"],
    )
    rows = [{**serialize_budget(budget), "progress": progress.to_dict()} for budget, progress in pairs]
    return success(count=len(rows), budgets=rows)
