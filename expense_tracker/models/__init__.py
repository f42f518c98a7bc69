"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    Expense,
    ExpenseSummary,
    new_id,
    utcnow,
)
from expense_tracker.models.user import (
    Credentials,
    Identity,
    TokenResponse,
    User,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "Expense",
    "ExpenseSummary",
    "new_id",
    "utcnow",
    # User models
    "Credentials",
    "Identity",
    "TokenResponse",
    "User",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
