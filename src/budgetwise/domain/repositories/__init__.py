"""Repository protocol definitions for domain layer."""

from .account import AccountRepository
from .budget import BudgetRepository
from .category import CategoryRepository
from .recurring import RecurringTransactionRepository
from .transaction import ExpenseTotals, TransactionRepository

__all__ = [
    "AccountRepository",
    "BudgetRepository",
    "CategoryRepository",
    "ExpenseTotals",
    "RecurringTransactionRepository",
    "TransactionRepository",
]
