"""SQLModel table exports."""

from .account import Account, AccountType
from .budget import Budget, BudgetPeriod
from .category import Category, CategoryType
from .recurring import RecurringFrequency, RecurringTransaction
from .transaction import Transaction, TransactionType
from .user import User

__all__ = [
    "Account",
    "AccountType",
    "Budget",
    "BudgetPeriod",
    "Category",
    "CategoryType",
    "RecurringFrequency",
    "RecurringTransaction",
    "Transaction",
    "TransactionType",
    "User",
]
