"""Blueprint exports."""

from . import accounts, budgets, categories, recurring, transactions

__all__ = [
    "accounts",
    "budgets",
    "categories",
    "recurring",
    "transactions",
]
