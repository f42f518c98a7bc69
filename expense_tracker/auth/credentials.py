"""
Credential Store

Registers users, checks passwords and mints/verifies bearer tokens.

DESIGN DECISION: Passwords are hashed with werkzeug's salted hashes
(a fresh random salt per password), and tokens are HS256 JWTs signed
with a server-held secret via python-jose.

SECURITY NOTES:
- An unknown username and a wrong password raise the same error with
  the same message, and both run one hash comparison, so callers
  cannot tell which usernames exist.
- Nothing sensitive is ever returned from register or logged.
- Hashing is deliberately slow, so it runs in a worker thread.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from expense_tracker.audit import AuditLogger
from expense_tracker.config import AuthSettings, get_settings
from expense_tracker.models.user import Identity, User
from expense_tracker.services.storage import ConflictError, UserStorageInterface
from expense_tracker.validation import ValidationError


class AuthenticationError(Exception):
    """Base exception for authentication failures."""
    pass


class InvalidCredentialsError(AuthenticationError):
    """Unknown username or wrong password (deliberately not distinguished)."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class MissingTokenError(AuthenticationError):
    """No bearer token was presented."""

    def __init__(self, message: str = "Access token required"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Token is malformed, expired, or has a bad signature."""

    def __init__(self, message: str = "Invalid token", reason: str = "invalid"):
        self.reason = reason
        super().__init__(message)


class CredentialStore:
    """
    Authenticates users and issues/verifies bearer tokens.

    Usage:
        store = CredentialStore(user_storage)
        user_id = await store.register("alice", "s3cret")
        token = await store.login("alice", "s3cret")
        identity = store.verify(token)
    """

    def __init__(
        self,
        user_storage: UserStorageInterface,
        settings: Optional[AuthSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = user_storage
        self._settings = settings or get_settings().auth
        self._audit_logger = audit_logger
        # Compared against when the username is unknown
        self._dummy_hash = generate_password_hash(
            "not-a-real-password",
            method=self._settings.password_hash_method,
        )

    @staticmethod
    def _require_credentials(username: Optional[str], password: Optional[str]) -> None:
        if not username or not username.strip() or not password:
            raise ValidationError("Username and password required")

    async def register(self, username: str, password: str) -> str:
        """
        Register a new user.

        Returns:
            The new user's ID

        Raises:
            ValidationError: If username or password is empty
            ConflictError: If the username is already taken
        """
        self._require_credentials(username, password)

        password_hash = await asyncio.to_thread(
            generate_password_hash,
            password,
            method=self._settings.password_hash_method,
        )
        user = User(username=username, password_hash=password_hash)

        try:
            await self._storage.save_user(user)
        except ConflictError:
            if self._audit_logger:
                await self._audit_logger.log_registration_rejected(
                    username=username,
                    reason="duplicate_username",
                )
            raise ConflictError("User already exists")

        if self._audit_logger:
            await self._audit_logger.log_user_registered(user.id, user.username)
        return user.id

    async def login(self, username: str, password: str) -> str:
        """
        Check credentials and issue a signed token.

        Raises:
            ValidationError: If username or password is empty
            InvalidCredentialsError: If the username is unknown or the
                password does not match
        """
        self._require_credentials(username, password)

        user = await self._storage.get_user_by_username(username)
        if user is None:
            await asyncio.to_thread(check_password_hash, self._dummy_hash, password)
            password_ok = False
        else:
            password_ok = await asyncio.to_thread(
                check_password_hash, user.password_hash, password
            )

        if not password_ok:
            if self._audit_logger:
                await self._audit_logger.log_login_failed(username)
            raise InvalidCredentialsError()

        if self._audit_logger:
            await self._audit_logger.log_login_succeeded(user.id, user.username)
        return self.issue_token(user)

    def issue_token(self, user: User, now: Optional[datetime] = None) -> str:
        """Sign a token carrying the user's id and username."""
        now = now or datetime.now(timezone.utc)
        claims = {
            "id": user.id,
            "username": user.username,
            "iat": now,
            "exp": now + timedelta(hours=self._settings.token_expire_hours),
        }
        return jwt.encode(
            claims,
            self._settings.jwt_secret,
            algorithm=self._settings.jwt_algorithm,
        )

    def verify(self, token: Optional[str]) -> Identity:
        """
        Verify a bearer token and return the identity it carries.

        Pure function of the token and the server secret; touches no storage.

        Raises:
            MissingTokenError: If no token is given
            InvalidTokenError: If the token is malformed, expired,
                wrongly signed, or lacks the identity claims
        """
        if not token:
            raise MissingTokenError()

        try:
            claims = jwt.decode(
                token,
                self._settings.jwt_secret,
                algorithms=[self._settings.jwt_algorithm],
            )
        except ExpiredSignatureError:
            raise InvalidTokenError(reason="expired")
        except JWTError:
            raise InvalidTokenError(reason="malformed_or_bad_signature")

        user_id = claims.get("id")
        username = claims.get("username")
        if not isinstance(user_id, str) or not isinstance(username, str):
            raise InvalidTokenError(reason="missing_claims")

        return Identity(id=user_id, username=username)
