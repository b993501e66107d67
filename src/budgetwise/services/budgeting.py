"""Budgeting domain services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from ..domain.repositories import TransactionRepository
from ..models.budget import Budget
from .periods import resolve_period

CENT = Decimal("0.01")
STATUS_UNDER = "under"
STATUS_OVER = "over"


def _money(value: Decimal) -> str:
    return str(value.quantize(CENT, rounding=ROUND_HALF_UP))


@dataclass(frozen=True, slots=True)
class BudgetProgress:
    """Read-only snapshot of a budget in its current period."""

    budget_id: Optional[int]
    period_start: datetime
    period_end: datetime
    spent: Decimal
    remaining: Decimal
    percentage: Decimal
    daily_budget: Decimal
    expected_spending: Decimal
    status: str
    transaction_count: int
    threshold_reached: bool

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly rendering: money as 2-dp strings, ISO timestamps."""
        return {
            "budgetId": self.budget_id,
            "spent": _money(self.spent),
            "remaining": _money(self.remaining),
            "percentage": float(self.percentage.quantize(CENT, rounding=ROUND_HALF_UP)),
            "periodStart": self.period_start.isoformat(),
            "periodEnd": self.period_end.isoformat(),
            "dailyBudget": _money(self.daily_budget),
            "expectedSpending": _money(self.expected_spending),
            "status": self.status,
            "transactionCount": self.transaction_count,
            "thresholdReached": self.threshold_reached,
        }


def compute_progress(
    budget: Budget,
    *,
    user_id: int,
    transactions: TransactionRepository,
    now: datetime,
    week_start: int = 0,
) -> BudgetProgress:
    """Measure spending against ``budget`` for the period containing ``now``.

    ``status`` is pace-relative: spending is compared with what an even spend
    across the period would have reached by today, not with the full amount.
    """

    period = resolve_period(
        budget.period, budget.start_date, budget.end_date, now, week_start=week_start
    )
    totals = transactions.sum_expenses(
        user_id=user_id,
        category_id=budget.category_id,
        start=period.start,
        end=period.end,
    )

    amount = Decimal(str(budget.amount))
    spent = totals.total
    percentage = spent / amount * 100 if amount else Decimal("0")
    remaining = amount - spent

    total_days = period.total_days
    elapsed_days = period.elapsed_days(now)
    if total_days == 0:
        # Zero-length custom window: the whole amount is due on its only day.
        daily_budget = amount
        expected_spending = amount if elapsed_days >= 1 else Decimal("0")
    else:
        daily_budget = amount / total_days
        expected_spending = daily_budget * elapsed_days

    return BudgetProgress(
        budget_id=budget.id,
        period_start=period.start,
        period_end=period.end,
        spent=spent,
        remaining=remaining,
        percentage=percentage,
        daily_budget=daily_budget,
        expected_spending=expected_spending,
        status=STATUS_UNDER if spent <= expected_spending else STATUS_OVER,
        transaction_count=totals.count,
        threshold_reached=percentage >= budget.notification_threshold,
    )


def progress_for_budgets(
    budgets: Iterable[Budget],
    *,
    user_id: int,
    transactions: TransactionRepository,
    now: datetime,
    week_start: int = 0,
) -> list[tuple[Budget, BudgetProgress]]:
    """Compute progress for several budgets against the same ``now``."""

    return [
        (
            budget,
            compute_progress(
                budget,
                user_id=user_id,
                transactions=transactions,
                now=now,
                week_start=week_start,
            ),
        )
        for budget in budgets
    ]
