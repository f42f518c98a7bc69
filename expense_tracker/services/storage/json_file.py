"""
JSON File Storage Implementation

DESIGN DECISION: Each collection (users, expenses) is one JSON array in
one file because:
1. No database setup required
2. Data is human-readable and easy to back up
3. The expected volume is a single household's expenses

TRADEOFFS:
- Every operation reads the whole collection (we filter in Python)
- Only one process may write safely; other processes are last-writer-wins

Within one process all writes to a file are serialized through an
asyncio.Lock, so two concurrent requests cannot lose each other's update.
Writes go to a temporary file that atomically replaces the collection,
so a reader never sees a half-written file.
File I/O runs in worker threads so it never blocks the event loop.
"""

import asyncio
import json
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.models.expense import Expense
from expense_tracker.models.user import User
from expense_tracker.services.storage.interface import (
    ConflictError,
    ExpenseStorageInterface,
    NotFoundError,
    StorageError,
    UserStorageInterface,
)


logger = structlog.get_logger(__name__)


class JsonFileClient:
    """
    Low-level wrapper around one JSON array file.

    Handles initialization, whole-collection reads and atomic writes,
    and owns the single-writer lock for the file.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def ensure_initialized(self) -> None:
        """Create the data directory and an empty collection if missing."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if not self._path.exists():
                self._write_atomic([])
        except OSError as e:
            raise StorageError(f"Failed to initialize {self._path}: {e}")

    def read_all(self) -> list[dict]:
        """
        Read the full collection.

        A missing file is an empty collection. A corrupt file is an error,
        never silently treated as empty.
        """
        if not self._path.exists():
            return []
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            raise StorageError(f"Expected a JSON array of objects in {self._path}")
        return data

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, records: list[dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    async def read_all_async(self) -> list[dict]:
        """read_all in a worker thread."""
        return await asyncio.to_thread(self.read_all)

    def write_all(self, records: list[dict]) -> None:
        """Replace the full collection atomically."""
        try:
            self._write_atomic(records)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[list[dict]]:
        """
        Locked read-modify-write cycle.

        Usage:
            async with client.transaction() as records:
                records.append(...)

        The collection is written back only if the block exits cleanly.
        """
        async with self._lock:
            records = await asyncio.to_thread(self.read_all)
            yield records
            await asyncio.to_thread(self.write_all, records)


class JsonFileUserStorage(UserStorageInterface):
    """
    JSON file implementation of user storage.

    Usernames are unique; the uniqueness check runs under the write lock.
    """

    def __init__(self, client: JsonFileClient):
        self._client = client

    def _record_to_user(self, record: dict) -> User:
        return User.model_validate(record)

    async def save_user(self, user: User) -> bool:
        """Save a new user, rejecting duplicate usernames."""
        async with self._client.transaction() as records:
            if any(r.get("username") == user.username for r in records):
                raise ConflictError(f"User already exists: {user.username}")
            records.append(user.to_record())
        return True

    async def _find_user(self, key: str, value: str) -> Optional[User]:
        for record in await self._client.read_all_async():
            if record.get(key) == value:
                try:
                    return self._record_to_user(record)
                except PydanticValidationError as e:
                    raise StorageError(f"Malformed user record: {e}")
        return None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self._find_user("username", username)

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        return await self._find_user("id", user_id)


class JsonFileExpenseStorage(ExpenseStorageInterface):
    """
    JSON file implementation of expense storage.

    Expenses are stored as camelCase objects, one per array element,
    in insertion order.
    """

    def __init__(self, client: JsonFileClient):
        self._client = client

    @staticmethod
    def _matches(record: dict, owner_id: str, expense_id: str) -> bool:
        return record.get("id") == expense_id and record.get("ownerId") == owner_id

    def _record_to_expense(self, record: dict) -> Expense:
        return Expense.model_validate(record)

    async def save_expense(self, expense: Expense) -> bool:
        """Append an expense to the collection."""
        async with self._client.transaction() as records:
            records.append(expense.to_record())
        return True

    async def get_expense(self, owner_id: str, expense_id: str) -> Optional[Expense]:
        """Retrieve one of the owner's expenses."""
        for record in await self._client.read_all_async():
            if self._matches(record, owner_id, expense_id):
                try:
                    return self._record_to_expense(record)
                except PydanticValidationError as e:
                    raise StorageError(f"Malformed expense record {expense_id}: {e}")
        return None

    async def update_expense(self, expense: Expense) -> bool:
        """Replace an existing expense in place."""
        async with self._client.transaction() as records:
            for idx, record in enumerate(records):
                if self._matches(record, expense.owner_id, expense.id):
                    records[idx] = expense.to_record()
                    break
            else:
                raise NotFoundError(f"Expense not found: {expense.id}")
        return True

    async def delete_expense(self, owner_id: str, expense_id: str) -> bool:
        """Delete one of the owner's expenses."""
        async with self._client.transaction() as records:
            remaining = [r for r in records if not self._matches(r, owner_id, expense_id)]
            if len(remaining) == len(records):
                raise NotFoundError(f"Expense not found: {expense_id}")
            records[:] = remaining
        return True

    async def list_expenses(self, owner_id: str) -> list[Expense]:
        """List the owner's expenses in insertion order."""
        expenses = []
        for record in await self._client.read_all_async():
            if record.get("ownerId") != owner_id:
                continue
            try:
                expenses.append(self._record_to_expense(record))
            except PydanticValidationError:
                logger.warning(
                    "skipping_malformed_expense",
                    expense_id=record.get("id"),
                    path=str(self._client.path),
                )
                continue
        return expenses
