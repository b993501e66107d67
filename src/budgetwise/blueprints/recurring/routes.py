"""Recurring transaction routes.

``POST /<id>/generate`` books one occurrence through the reconciler, so the
new transaction moves balances exactly like one posted by hand.
"""

from __future__ import annotations

from typing import Any, Optional

from flask import request

from ...errors import PayloadInvalid, RecurringNotFound
from ...extensions import get_session_factory
from ...infra.repositories import SQLModelRecurringRepository
from ...models.recurring import RecurringTransaction
from ...models.transaction import TransactionType
from ...services.recurring import RecurringService
from ..common import current_user_id, iso, local_now, money, parse_body, query_int, success
from ..transactions.routes import serialize_transaction
from . import bp
from .forms import RecurringForm, RecurringUpdateForm


def _service() -> RecurringService:
    return RecurringService(get_session_factory())


def _repository() -> SQLModelRecurringRepository:
    return SQLModelRecurringRepository(get_session_factory())


def _active_filter() -> Optional[bool]:
    value = request.args.get("is_active")
    if value in (None, ""):
        return None
    if value.lower() not in {"true", "false"}:
        raise PayloadInvalid(errors={"is_active": ["Expected true or false"]})
    return value.lower() == "true"


def _type_filter() -> Optional[str]:
    value = request.args.get("type")
    if not value:
        return None
    if value not in {t.value for t in TransactionType}:
        raise PayloadInvalid(errors={"type": ["Expected income, expense or transfer"]})
    return value


def serialize_recurring(template: RecurringTransaction) -> dict[str, Any]:
    return {
        "id": template.id,
        "accountId": template.account_id,
        "transferAccountId": template.transfer_account_id,
        "categoryId": template.category_id,
        "amount": money(template.amount),
        "type": template.type,
        "description": template.description,
        "payee": template.payee,
        "notes": template.notes,
        "frequency": template.frequency,
        "startDate": iso(template.start_date),
        "endDate": iso(template.end_date),
        "lastProcessed": iso(template.last_processed),
        "nextDue": iso(template.next_due),
        "isActive": template.is_active,
        "createdAt": iso(template.created_at),
        "updatedAt": iso(template.updated_at),
    }


@bp.post("")
def create_recurring():
    user_id = current_user_id()
    form = parse_body(RecurringForm)
    template = _service().create(
        RecurringTransaction(**form.model_dump()), user_id=user_id, now=local_now()
    )
    return success(
        201,
        message="Recurring transaction created successfully",
        recurringTransaction=serialize_recurring(template),
    )


@bp.get("")
def list_recurring():
    """List templates, soonest due first."""

    templates = _repository().list_all(
        user_id=current_user_id(),
        is_active=_active_filter(),
        txn_type=_type_filter(),
        account_id=query_int("account_id"),
    )
    return success(
        count=len(templates),
        recurringTransactions=[serialize_recurring(t) for t in templates],
    )


@bp.get("/<int:recurring_id>")
def get_recurring(recurring_id: int):
    template = _repository().get_by_id(recurring_id, user_id=current_user_id())
    if template is None:
        raise RecurringNotFound()
    return success(recurringTransaction=serialize_recurring(template))


@bp.put("/<int:recurring_id>")
def update_recurring(recurring_id: int):
    user_id = current_user_id()
    changes = parse_body(RecurringUpdateForm).changes()
    template = _service().update(recurring_id, user_id=user_id, now=local_now(), **changes)
    return success(
        message="Recurring transaction updated successfully",
        recurringTransaction=serialize_recurring(template),
    )


@bp.delete("/<int:recurring_id>")
def delete_recurring(recurring_id: int):
    _repository().delete(recurring_id, user_id=current_user_id())
    return success(message="Recurring transaction deleted successfully")


@bp.post("/<int:recurring_id>/generate")
def generate_transaction(recurring_id: int):
    """Book one occurrence dated now and advance the template's due date."""

    txn = _service().generate(recurring_id, user_id=current_user_id(), now=local_now())
    return success(
        201, message="Transaction generated successfully", transaction=serialize_transaction(txn)
    )
