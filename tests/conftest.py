"""
Shared fixtures.

Every test gets its own data directory under tmp_path, so nothing
touches ./data. Password hashing uses a cheap pbkdf2 setting to keep
the suite fast.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from expense_tracker.api import create_app
from expense_tracker.audit import AuditLogger
from expense_tracker.auth import CredentialStore
from expense_tracker.config import AppSettings, AuthSettings, StorageSettings
from expense_tracker.expenses import ExpenseStore
from expense_tracker.models.user import Identity
from expense_tracker.orchestrator import create_app_components
from expense_tracker.services.storage import (
    JsonFileClient,
    JsonFileExpenseStorage,
    JsonFileUserStorage,
)
from expense_tracker.validation import ExpenseValidator


TEST_SECRET = "test-secret-that-is-long-enough-for-hs256-signing"


@pytest.fixture
def run():
    """Run a coroutine to completion."""
    return asyncio.run


@pytest.fixture
def app_settings():
    return AppSettings(_env_file=None)


@pytest.fixture
def auth_settings():
    return AuthSettings(
        jwt_secret=TEST_SECRET,
        password_hash_method="pbkdf2:sha256:1000",
    )


@pytest.fixture
def storage_settings(tmp_path):
    return StorageSettings(data_dir=tmp_path / "data")


@pytest.fixture
def users_client(storage_settings):
    client = JsonFileClient(storage_settings.users_path)
    client.ensure_initialized()
    return client


@pytest.fixture
def expenses_client(storage_settings):
    client = JsonFileClient(storage_settings.expenses_path)
    client.ensure_initialized()
    return client


@pytest.fixture
def user_storage(users_client):
    return JsonFileUserStorage(users_client)


@pytest.fixture
def expense_storage(expenses_client):
    return JsonFileExpenseStorage(expenses_client)


@pytest.fixture
def credential_store(user_storage, auth_settings):
    return CredentialStore(user_storage, settings=auth_settings, audit_logger=AuditLogger())


@pytest.fixture
def expense_store(expense_storage, app_settings):
    return ExpenseStore(
        expense_storage,
        validator=ExpenseValidator(app_settings),
        audit_logger=AuditLogger(),
    )


@pytest.fixture
def alice():
    return Identity(id="user-alice", username="alice")


@pytest.fixture
def bob():
    return Identity(id="user-bob", username="bob")


@pytest.fixture
def client(storage_settings, auth_settings, app_settings):
    components = create_app_components(
        storage_settings=storage_settings,
        auth_settings=auth_settings,
        app_settings=app_settings,
    )
    return TestClient(create_app(components))
