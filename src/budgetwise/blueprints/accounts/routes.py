"""Account routes."""

from __future__ import annotations

from typing import Any

from ...errors import AccountNotFound
from ...extensions import get_session_factory
from ...infra.repositories import SQLModelAccountRepository, SQLModelTransactionRepository
from ...logging_config import get_logger
from ...models.account import Account
from ...services.balances import balance_history
from ..common import (
    current_user_id,
    iso,
    local_now,
    money,
    parse_body,
    query_datetime,
    success,
)
from . import bp
from .forms import AccountForm, AccountUpdateForm

logger = get_logger("accounts")


def _repository() -> SQLModelAccountRepository:
    return SQLModelAccountRepository(get_session_factory())


def serialize_account(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "type": account.account_type,
        "balance": money(account.balance),
        "openingBalance": money(account.opening_balance),
        "currency": account.currency,
        "includeInNetWorth": account.include_in_net_worth,
        "isActive": account.is_active,
        "institution": account.institution,
        "notes": account.notes,
        "createdAt": iso(account.created_at),
        "updatedAt": iso(account.updated_at),
    }


@bp.post("")
def create_account():
    """Open an account with an initial balance."""

    user_id = current_user_id()
    form = parse_body(AccountForm)
    account = _repository().create(Account(**form.model_dump()), user_id=user_id)
    logger.info("Account created", extra={"account_id": account.id, "user_id": user_id})
    return success(201, account=serialize_account(account))


@bp.get("")
def list_accounts():
    """List the caller's accounts by name."""

    accounts = _repository().list_all(user_id=current_user_id())
    return success(count=len(accounts), accounts=[serialize_account(a) for a in accounts])


@bp.get("/<int:account_id>")
def get_account(account_id: int):
    account = _repository().get_by_id(account_id, user_id=current_user_id())
    if account is None:
        raise AccountNotFound()
    return success(account=serialize_account(account))


@bp.put("/<int:account_id>")
def update_account(account_id: int):
    """Edit descriptive fields; the balance only moves through transactions."""

    user_id = current_user_id()
    form = parse_body(AccountUpdateForm)
    account = _repository().update_details(account_id, user_id=user_id, **form.changes())
    return success(account=serialize_account(account))


@bp.delete("/<int:account_id>")
def delete_account(account_id: int):
    """Delete an account that no transaction references."""

    user_id = current_user_id()
    _repository().delete(account_id, user_id=user_id)
    logger.info("Account deleted", extra={"account_id": account_id, "user_id": user_id})
    return success(message="Account deleted")


@bp.get("/<int:account_id>/history")
def account_history(account_id: int):
    """Running balance after each past transaction, optionally windowed."""

    user_id = current_user_id()
    account = _repository().get_by_id(account_id, user_id=user_id)
    if account is None:
        raise AccountNotFound()

    transactions = SQLModelTransactionRepository(get_session_factory()).list_for_account(
        account_id, user_id=user_id
    )
    history = balance_history(
        account,
        transactions,
        now=local_now(),
        start=query_datetime("start"),
        end=query_datetime("end"),
    )
    return success(balanceHistory=history)
