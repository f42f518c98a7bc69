"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements flat JSON files as the backend, but designed to be swappable.
"""

from expense_tracker.services.storage.interface import (
    ConflictError,
    ExpenseStorageInterface,
    NotFoundError,
    StorageError,
    UserStorageInterface,
)
from expense_tracker.services.storage.json_file import (
    JsonFileClient,
    JsonFileExpenseStorage,
    JsonFileUserStorage,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    "UserStorageInterface",
    # Exceptions
    "ConflictError",
    "NotFoundError",
    "StorageError",
    # JSON file implementation
    "JsonFileClient",
    "JsonFileExpenseStorage",
    "JsonFileUserStorage",
]
