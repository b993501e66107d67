"""Recurring transaction templates and on-demand generation.

Nothing here runs on a timer: a transaction is generated only when the owner
asks for one, and it goes through ``BalanceReconciler.create`` in the same
unit of work that advances the template's due date.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from sqlmodel import Session

from ..domain.repositories import RecurringTransactionRepository
from ..errors import InvalidTransition, RecurringNotFound
from ..infra.database import SessionFactory
from ..infra.repositories import SQLModelRecurringRepository
from ..logging_config import get_logger
from ..models.recurring import RecurringFrequency, RecurringTransaction
from ..models.transaction import Transaction
from .reconciler import BalanceReconciler, LedgerEntry, validate_entry

logger = get_logger("recurring")

TEMPLATE_FIELDS = frozenset(
    {
        "account_id",
        "transfer_account_id",
        "category_id",
        "amount",
        "type",
        "description",
        "payee",
        "notes",
        "frequency",
        "start_date",
        "end_date",
        "is_active",
    }
)
_SCHEDULE_FIELDS = frozenset({"frequency", "start_date"})

_DAY_STEPS = {
    RecurringFrequency.DAILY.value: 1,
    RecurringFrequency.WEEKLY.value: 7,
    RecurringFrequency.BIWEEKLY.value: 14,
}
_MONTH_STEPS = {
    RecurringFrequency.MONTHLY.value: 1,
    RecurringFrequency.QUARTERLY.value: 3,
    RecurringFrequency.YEARLY.value: 12,
}


def _add_months(value: datetime, months: int) -> datetime:
    index = value.month - 1 + months
    year, month = value.year + index // 12, index % 12 + 1
    # Jan 31 + 1 month is Feb 28/29, not early March.
    return value.replace(year=year, month=month, day=min(value.day, monthrange(year, month)[1]))


def shift(value: datetime, frequency: str, times: int = 1) -> datetime:
    """Move ``value`` forward by ``times`` occurrences of ``frequency``.

    Unknown frequencies step monthly.
    """

    if frequency in _DAY_STEPS:
        return value + timedelta(days=_DAY_STEPS[frequency] * times)
    return _add_months(value, _MONTH_STEPS.get(frequency, 1) * times)


def next_due_date(
    start_date: datetime,
    frequency: str,
    *,
    now: datetime,
    last_processed: Optional[datetime] = None,
) -> datetime:
    """Next occurrence of a template.

    After a generation it is one step past ``last_processed``. Before the
    first one it is the earliest occurrence counted from ``start_date`` that
    is not in the past; a future start date is itself the first occurrence.
    """

    if last_processed is not None:
        return shift(last_processed, frequency)
    due, steps = start_date, 0
    while due < now:
        steps += 1
        # Counted from the start so month-end dates do not drift.
        due = shift(start_date, frequency, steps)
    return due


def _check_window(template: RecurringTransaction) -> None:
    if template.end_date is not None and template.end_date < template.start_date:
        raise InvalidTransition("End date cannot be before the start date")


class RecurringService:
    """Template lifecycle plus generation of ledger transactions."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        templates: RecurringTransactionRepository | None = None,
        reconciler: BalanceReconciler | None = None,
    ):
        self.session_factory = session_factory
        self.templates: RecurringTransactionRepository = (
            templates or SQLModelRecurringRepository(session_factory)
        )
        self.reconciler = reconciler or BalanceReconciler(session_factory)

    def create(
        self, template: RecurringTransaction, *, user_id: int, now: datetime
    ) -> RecurringTransaction:
        entry = LedgerEntry.of(template)
        validate_entry(entry)
        _check_window(template)
        with self.session_factory() as session:
            self.reconciler.check_references(entry, user_id=user_id, session=session)
            template.user_id = user_id
            template.next_due = next_due_date(template.start_date, template.frequency, now=now)
            self.templates.add(template, session=session)
            session.expunge(template)

        logger.info(
            "Recurring transaction created",
            extra={"recurring_id": template.id, "user_id": user_id, "frequency": template.frequency},
        )
        return template

    def update(
        self, recurring_id: int, *, user_id: int, now: datetime, **changes: Any
    ) -> RecurringTransaction:
        """Apply ``changes``; a new frequency or start date reschedules the template."""

        unknown = set(changes) - TEMPLATE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        with self.session_factory() as session:
            template = self._load(recurring_id, user_id=user_id, session=session)
            rescheduled = any(
                key in _SCHEDULE_FIELDS and getattr(template, key) != value
                for key, value in changes.items()
            )
            for key, value in changes.items():
                setattr(template, key, value)

            entry = LedgerEntry.of(template)
            validate_entry(entry)
            _check_window(template)
            self.reconciler.check_references(entry, user_id=user_id, session=session)

            if rescheduled:
                template.next_due = next_due_date(
                    template.start_date,
                    template.frequency,
                    now=now,
                    last_processed=template.last_processed,
                )
            template.updated_at = datetime.now(timezone.utc)
            session.add(template)
            session.flush()
            session.refresh(template)
            session.expunge(template)
        return template

    def generate(self, recurring_id: int, *, user_id: int, now: datetime) -> Transaction:
        """Record one occurrence dated ``now`` and advance the template.

        The transaction, its balance deltas and the template's new due date
        commit together or not at all.
        """

        with self.session_factory() as session:
            template = self._load(recurring_id, user_id=user_id, session=session)
            transaction = Transaction(
                account_id=template.account_id,
                transfer_account_id=template.transfer_account_id,
                category_id=template.category_id,
                recurring_id=template.id,
                amount=template.amount,
                type=template.type,
                occurred_at=now,
                description=template.description,
                payee=template.payee,
                notes=template.notes,
            )
            self.reconciler.create(transaction, user_id=user_id, session=session)

            template.last_processed = now
            template.next_due = next_due_date(
                template.start_date, template.frequency, now=now, last_processed=now
            )
            template.updated_at = datetime.now(timezone.utc)
            session.add(template)

        logger.info(
            "Recurring transaction generated",
            extra={
                "recurring_id": recurring_id,
                "transaction_id": transaction.id,
                "user_id": user_id,
            },
        )
        return transaction

    def _load(
        self, recurring_id: int, *, user_id: int, session: Session
    ) -> RecurringTransaction:
        template = self.templates.get_by_id(recurring_id, user_id=user_id, session=session)
        if template is None:
            raise RecurringNotFound()
        return template


__all__ = ["RecurringService", "next_due_date", "shift"]
