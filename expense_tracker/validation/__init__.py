"""Input validation package."""

from expense_tracker.validation.validator import (
    ExpenseValidator,
    ValidationError,
    ValidationIssue,
)

__all__ = ["ExpenseValidator", "ValidationError", "ValidationIssue"]
