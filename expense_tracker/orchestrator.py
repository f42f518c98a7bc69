"""
Application Wiring for Expense Tracker

This module builds the long-lived objects the HTTP layer depends on:
storage clients, the audit logger, the credential store and the
expense store.

DESIGN DECISION: There is no module-level state. Each application gets
its own store objects (and therefore its own write locks), created here
and handed to request handlers through dependencies.
"""

from typing import NamedTuple, Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.auth import CredentialStore
from expense_tracker.config import (
    AppSettings,
    AuthSettings,
    StorageSettings,
    get_settings,
)
from expense_tracker.expenses import ExpenseStore
from expense_tracker.services.storage import (
    JsonFileClient,
    JsonFileExpenseStorage,
    JsonFileUserStorage,
)
from expense_tracker.validation import ExpenseValidator


class AppComponents(NamedTuple):
    """Everything a running application needs."""

    app_settings: AppSettings
    credential_store: CredentialStore
    expense_store: ExpenseStore
    audit_logger: AuditLogger


def create_app_components(
    storage_settings: Optional[StorageSettings] = None,
    auth_settings: Optional[AuthSettings] = None,
    app_settings: Optional[AppSettings] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Any settings group not passed in is loaded from the environment.

    Returns:
        AppComponents with initialized stores
    """
    settings = get_settings()
    storage_settings = storage_settings or settings.storage
    auth_settings = auth_settings or settings.auth
    app_settings = app_settings or settings.app

    audit_logger = AuditLogger()

    users_client = JsonFileClient(storage_settings.users_path)
    expenses_client = JsonFileClient(storage_settings.expenses_path)
    users_client.ensure_initialized()
    expenses_client.ensure_initialized()

    credential_store = CredentialStore(
        user_storage=JsonFileUserStorage(users_client),
        settings=auth_settings,
        audit_logger=audit_logger,
    )
    expense_store = ExpenseStore(
        storage=JsonFileExpenseStorage(expenses_client),
        validator=ExpenseValidator(app_settings),
        audit_logger=audit_logger,
    )

    return AppComponents(
        app_settings=app_settings,
        credential_store=credential_store,
        expense_store=expense_store,
        audit_logger=audit_logger,
    )
