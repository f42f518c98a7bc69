"""Expense store package."""

from expense_tracker.expenses.store import ExpenseStore

__all__ = ["ExpenseStore"]
