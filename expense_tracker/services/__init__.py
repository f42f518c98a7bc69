"""Services package."""

from expense_tracker.services.storage import (
    ConflictError,
    ExpenseStorageInterface,
    JsonFileClient,
    JsonFileExpenseStorage,
    JsonFileUserStorage,
    NotFoundError,
    StorageError,
    UserStorageInterface,
)

__all__ = [
    # Storage services
    "ConflictError",
    "ExpenseStorageInterface",
    "JsonFileClient",
    "JsonFileExpenseStorage",
    "JsonFileUserStorage",
    "NotFoundError",
    "StorageError",
    "UserStorageInterface",
]
