"""Authentication package."""

from expense_tracker.auth.credentials import (
    AuthenticationError,
    CredentialStore,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
)

__all__ = [
    "AuthenticationError",
    "CredentialStore",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingTokenError",
]
