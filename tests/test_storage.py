"""Tests for the JSON file storage backend."""

import asyncio
import json
import threading

import pytest
from datetime import date
from decimal import Decimal

from expense_tracker.models.expense import Expense
from expense_tracker.models.user import User
from expense_tracker.services.storage import (
    ConflictError,
    JsonFileClient,
    JsonFileExpenseStorage,
    NotFoundError,
    StorageError,
)


def make_expense(owner_id: str, description: str = "Lunch", amount: str = "12.50") -> Expense:
    return Expense(
        owner_id=owner_id,
        description=description,
        amount=Decimal(amount),
        category="Food",
        expense_date=date(2024, 1, 5),
    )


class TestJsonFileClient:
    """Tests for the low-level file wrapper."""

    def test_ensure_initialized_creates_empty_array(self, tmp_path):
        """Test that a fresh data directory gets an empty collection."""
        path = tmp_path / "nested" / "expenses.json"
        JsonFileClient(path).ensure_initialized()
        assert json.loads(path.read_text()) == []

    def test_ensure_initialized_keeps_existing_data(self, tmp_path):
        """Test that initialization never truncates existing data."""
        path = tmp_path / "expenses.json"
        path.write_text('[{"id": "1"}]')
        JsonFileClient(path).ensure_initialized()
        assert json.loads(path.read_text()) == [{"id": "1"}]

    def test_missing_file_reads_as_empty(self, tmp_path):
        """Test that a missing file is an empty collection."""
        assert JsonFileClient(tmp_path / "nope.json").read_all() == []

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        """Test that corrupt JSON is reported, not silently emptied."""
        path = tmp_path / "expenses.json"
        path.write_text("{not json")
        with pytest.raises(StorageError):
            JsonFileClient(path).read_all()

    def test_non_array_raises_storage_error(self, tmp_path):
        """Test that a JSON object instead of an array is rejected."""
        path = tmp_path / "expenses.json"
        path.write_text('{"id": "1"}')
        with pytest.raises(StorageError):
            JsonFileClient(path).read_all()

    def test_write_leaves_no_temp_files(self, tmp_path):
        """Test that the atomic write cleans up after itself."""
        path = tmp_path / "expenses.json"
        client = JsonFileClient(path)
        client.write_all([{"id": "a"}, {"id": "b"}])
        assert json.loads(path.read_text()) == [{"id": "a"}, {"id": "b"}]
        assert [p.name for p in tmp_path.iterdir()] == ["expenses.json"]

    def test_failed_transaction_does_not_write(self, tmp_path, run):
        """Test that an exception inside a transaction discards the changes."""
        path = tmp_path / "expenses.json"
        client = JsonFileClient(path)
        client.write_all([{"id": "a"}])

        async def failing():
            async with client.transaction() as records:
                records.append({"id": "b"})
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            run(failing())
        assert client.read_all() == [{"id": "a"}]

    def test_transaction_io_runs_in_worker_threads(self, tmp_path, run, monkeypatch):
        """Test that reads and writes inside a transaction leave the loop thread."""
        client = JsonFileClient(tmp_path / "expenses.json")
        threads = []
        real_read = JsonFileClient.read_all
        real_write = JsonFileClient.write_all

        def read_all(self):
            threads.append(threading.get_ident())
            return real_read(self)

        def write_all(self, records):
            threads.append(threading.get_ident())
            return real_write(self, records)

        monkeypatch.setattr(JsonFileClient, "read_all", read_all)
        monkeypatch.setattr(JsonFileClient, "write_all", write_all)

        async def append():
            async with client.transaction() as records:
                records.append({"id": "a"})

        run(append())
        assert len(threads) == 2
        assert threading.get_ident() not in threads
        assert real_read(client) == [{"id": "a"}]


class TestJsonFileUserStorage:
    """Tests for user persistence."""

    def test_save_and_lookup(self, user_storage, run):
        """Test saving a user and finding it by name and by ID."""
        user = User(username="alice", password_hash="hash")
        assert run(user_storage.save_user(user)) is True

        by_name = run(user_storage.get_user_by_username("alice"))
        by_id = run(user_storage.get_user_by_id(user.id))
        assert by_name.id == user.id
        assert by_id.username == "alice"

    def test_duplicate_username_conflicts(self, user_storage, run):
        """Test that a second user with the same name is rejected."""
        run(user_storage.save_user(User(username="alice", password_hash="h1")))
        with pytest.raises(ConflictError):
            run(user_storage.save_user(User(username="alice", password_hash="h2")))

    def test_usernames_are_case_sensitive(self, user_storage, run):
        """Test that 'Alice' and 'alice' are different users."""
        run(user_storage.save_user(User(username="alice", password_hash="h1")))
        run(user_storage.save_user(User(username="Alice", password_hash="h2")))
        assert run(user_storage.get_user_by_username("ALICE")) is None

    def test_unknown_user_is_none(self, user_storage, run):
        """Test lookup of a user that does not exist."""
        assert run(user_storage.get_user_by_username("ghost")) is None


class TestJsonFileExpenseStorage:
    """Tests for expense persistence and owner scoping."""

    def test_save_persists_camel_case_record(self, expense_storage, expenses_client, run):
        """Test the on-disk layout of a saved expense."""
        expense = make_expense("u1")
        run(expense_storage.save_expense(expense))
        [record] = expenses_client.read_all()
        assert record["id"] == expense.id
        assert record["ownerId"] == "u1"
        assert record["amount"] == 12.5

    def test_list_is_scoped_and_ordered(self, expense_storage, run):
        """Test that list only returns the owner's records, in insertion order."""
        first = make_expense("u1", "First")
        run(expense_storage.save_expense(first))
        run(expense_storage.save_expense(make_expense("u2", "Other")))
        second = make_expense("u1", "Second")
        run(expense_storage.save_expense(second))

        listed = run(expense_storage.list_expenses("u1"))
        assert [e.id for e in listed] == [first.id, second.id]

    def test_get_requires_matching_owner(self, expense_storage, run):
        """Test that another owner's expense is invisible."""
        expense = make_expense("u1")
        run(expense_storage.save_expense(expense))
        assert run(expense_storage.get_expense("u1", expense.id)) is not None
        assert run(expense_storage.get_expense("u2", expense.id)) is None

    def test_update_requires_matching_owner(self, expense_storage, run):
        """Test that an update under the wrong owner is not found."""
        expense = make_expense("u1")
        run(expense_storage.save_expense(expense))
        hijacked = expense.model_copy(update={"owner_id": "u2", "description": "Hijacked"})
        with pytest.raises(NotFoundError):
            run(expense_storage.update_expense(hijacked))
        assert run(expense_storage.get_expense("u1", expense.id)).description == "Lunch"

    def test_delete(self, expense_storage, run):
        """Test delete and delete-twice."""
        expense = make_expense("u1")
        run(expense_storage.save_expense(expense))
        with pytest.raises(NotFoundError):
            run(expense_storage.delete_expense("u2", expense.id))
        assert run(expense_storage.delete_expense("u1", expense.id)) is True
        with pytest.raises(NotFoundError):
            run(expense_storage.delete_expense("u1", expense.id))

    def test_malformed_record_skipped_in_list(self, expense_storage, expenses_client, run):
        """Test that one bad record does not hide the rest."""
        good = make_expense("u1")
        expenses_client.write_all([
            {"id": "bad", "ownerId": "u1", "amount": "not a number"},
            good.to_record(),
        ])
        listed = run(expense_storage.list_expenses("u1"))
        assert [e.id for e in listed] == [good.id]

    def test_concurrent_saves_lose_nothing(self, tmp_path, run):
        """Test that concurrent writers are serialized."""
        storage = JsonFileExpenseStorage(JsonFileClient(tmp_path / "expenses.json"))

        async def save_many():
            await asyncio.gather(*(
                storage.save_expense(make_expense("u1", f"Item {i}")) for i in range(20)
            ))
            return await storage.list_expenses("u1")

        assert len(run(save_many())) == 20
