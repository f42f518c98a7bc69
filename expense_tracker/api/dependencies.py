"""
Request dependencies.

Stores live on app.state and reach handlers through these functions,
which keeps the handlers free of globals and easy to test.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from expense_tracker.audit import AuditLogger
from expense_tracker.auth import CredentialStore, InvalidTokenError
from expense_tracker.expenses import ExpenseStore
from expense_tracker.models.user import Identity
from expense_tracker.orchestrator import AppComponents


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


def get_credential_store(
    components: AppComponents = Depends(get_components),
) -> CredentialStore:
    return components.credential_store


def get_expense_store(
    components: AppComponents = Depends(get_components),
) -> ExpenseStore:
    return components.expense_store


def get_audit_logger(
    components: AppComponents = Depends(get_components),
) -> AuditLogger:
    return components.audit_logger


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer <token>' header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


async def get_current_identity(
    authorization: Optional[str] = Header(default=None),
    credential_store: CredentialStore = Depends(get_credential_store),
    audit_logger: AuditLogger = Depends(get_audit_logger),
) -> Identity:
    """
    Resolve the caller from the bearer token.

    Raises MissingTokenError (401) or InvalidTokenError (403).
    """
    try:
        return credential_store.verify(bearer_token(authorization))
    except InvalidTokenError as e:
        await audit_logger.log_token_rejected(e.reason)
        raise
