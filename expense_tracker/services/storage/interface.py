"""
Abstract Storage Interface

The stores talk to persistence only through these two interfaces. The
JSON file backend implements both; a database backend would too.

Expense methods all take the owner id, and a record only matches when
both its id and its owner match. Ownership is enforced at this seam as
well as in ExpenseStore.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_tracker.models.expense import Expense
from expense_tracker.models.user import User


class UserStorageInterface(ABC):
    """
    Abstract interface for user storage operations.

    Users are append-only: they are never updated or deleted.
    """

    @abstractmethod
    async def save_user(self, user: User) -> bool:
        """
        Save a new user.

        Raises:
            ConflictError: If the username is already taken
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        """
        Look up a user by exact (case-sensitive) username.

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Look up a user by ID."""
        pass


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Every lookup is keyed by (owner_id, expense_id). A record owned by
    someone else is reported exactly like a record that does not exist.
    """

    @abstractmethod
    async def save_expense(self, expense: Expense) -> bool:
        """
        Append a new expense.

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_expense(self, owner_id: str, expense_id: str) -> Optional[Expense]:
        """
        Retrieve one of the owner's expenses.

        Returns:
            The expense if it exists and belongs to owner_id, None otherwise
        """
        pass

    @abstractmethod
    async def update_expense(self, expense: Expense) -> bool:
        """
        Replace a stored expense with the given one.

        The stored record must match both expense.id and expense.owner_id.

        Raises:
            NotFoundError: If no such record exists for that owner
            StorageError: If update fails
        """
        pass

    @abstractmethod
    async def delete_expense(self, owner_id: str, expense_id: str) -> bool:
        """
        Permanently delete one of the owner's expenses.

        Raises:
            NotFoundError: If no such record exists for that owner
            StorageError: If delete fails
        """
        pass

    @abstractmethod
    async def list_expenses(self, owner_id: str) -> list[Expense]:
        """
        List the owner's expenses in insertion order.

        Never returns another owner's records.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConflictError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
