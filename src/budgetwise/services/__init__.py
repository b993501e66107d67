"""Domain services: period resolution, budget progress and balance reconciliation."""

from .balances import audit_balances, balance_history, ledger_delta
from .budgeting import BudgetProgress, compute_progress, progress_for_budgets
from .periods import Period, resolve_period
from .reconciler import BalanceDelta, BalanceReconciler, LedgerEntry, compute_deltas
from .recurring import RecurringService, next_due_date

__all__ = [
    "BalanceDelta",
    "BalanceReconciler",
    "BudgetProgress",
    "LedgerEntry",
    "Period",
    "RecurringService",
    "audit_balances",
    "balance_history",
    "compute_deltas",
    "compute_progress",
    "ledger_delta",
    "next_due_date",
    "progress_for_budgets",
    "resolve_period",
]
