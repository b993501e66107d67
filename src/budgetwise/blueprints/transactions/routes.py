"""Transaction routes.

Every mutation goes through ``BalanceReconciler`` so account balances move in
the same database transaction as the row itself.
"""

from __future__ import annotations

from math import ceil
from typing import Any, Optional

from flask import request

from ...errors import PayloadInvalid, TransactionNotFound
from ...extensions import get_session_factory
from ...infra.repositories import SQLModelTransactionRepository
from ...models.transaction import Transaction, TransactionType
from ...services.reconciler import BalanceReconciler
from ..common import (
    current_user_id,
    iso,
    money,
    parse_body,
    query_datetime,
    query_int,
    success,
)
from . import bp
from .forms import TransactionForm, TransactionUpdateForm

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def _reconciler() -> BalanceReconciler:
    return BalanceReconciler(get_session_factory())


def _type_filter() -> Optional[str]:
    value = request.args.get("type")
    if not value:
        return None
    if value not in {t.value for t in TransactionType}:
        raise PayloadInvalid(errors={"type": ["Expected income, expense or transfer"]})
    return value


def serialize_transaction(txn: Transaction) -> dict[str, Any]:
    return {
        "id": txn.id,
        "accountId": txn.account_id,
        "transferAccountId": txn.transfer_account_id,
        "categoryId": txn.category_id,
        "recurringId": txn.recurring_id,
        "amount": money(txn.amount),
        "type": txn.type,
        "date": iso(txn.occurred_at),
        "description": txn.description,
        "payee": txn.payee,
        "notes": txn.notes,
        "createdAt": iso(txn.created_at),
        "updatedAt": iso(txn.updated_at),
    }


@bp.post("")
def create_transaction():
    """Record a transaction and adjust the balances it touches."""

    user_id = current_user_id()
    form = parse_body(TransactionForm)
    txn = _reconciler().create(Transaction(**form.model_dump()), user_id=user_id)
    return success(201, transaction=serialize_transaction(txn))


@bp.get("")
def list_transactions():
    """Filtered, paginated listing, newest first."""

    user_id = current_user_id()
    page = query_int("page", default=1, minimum=1)
    limit = query_int("limit", default=DEFAULT_LIMIT, minimum=1, maximum=MAX_LIMIT)

    rows, total = SQLModelTransactionRepository(get_session_factory()).search(
        user_id=user_id,
        start_date=query_datetime("start"),
        end_date=query_datetime("end"),
        txn_type=_type_filter(),
        account_id=query_int("account_id"),
        category_id=query_int("category_id"),
        text=request.args.get("search") or None,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return success(
        count=len(rows),
        total=total,
        pagination={"page": page, "limit": limit, "pages": max(ceil(total / limit), 1)},
        transactions=[serialize_transaction(txn) for txn in rows],
    )


@bp.get("/<int:transaction_id>")
def get_transaction(transaction_id: int):
    txn = SQLModelTransactionRepository(get_session_factory()).get_by_id(
        transaction_id, user_id=current_user_id()
    )
    if txn is None:
        raise TransactionNotFound()
    return success(transaction=serialize_transaction(txn))


@bp.put("/<int:transaction_id>")
def update_transaction(transaction_id: int):
    """Apply a partial edit; balances are re-derived from old and new state."""

    user_id = current_user_id()
    form = parse_body(TransactionUpdateForm)
    txn = _reconciler().update(transaction_id, user_id=user_id, **form.changes())
    return success(transaction=serialize_transaction(txn))


@bp.delete("/<int:transaction_id>")
def delete_transaction(transaction_id: int):
    """Remove a transaction and reverse its balance effect."""

    _reconciler().delete(transaction_id, user_id=current_user_id())
    return success(message="Transaction deleted")
