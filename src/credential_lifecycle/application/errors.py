"""Typed failures surfaced by credential lifecycle use-cases."""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class CredentialFailure(StrEnum):
    """Failure codes a caller can map to its own response format."""

    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    STORE_UNAVAILABLE = "store_unavailable"


LOGIN_FAILED_MESSAGE = "invalid email or password"


class CredentialLifecycleError(Exception):
    """Base error for every credential lifecycle failure.

    ``str(error)`` carries the internal detail meant for logs, while
    ``public_message`` is what an outer layer may show to the end user.
    """

    failure: ClassVar[CredentialFailure]
    default_public_message: ClassVar[str]
    transient: ClassVar[bool] = False

    def __init__(self, detail: str, *, public_message: str | None = None) -> None:
        super().__init__(detail)
        self.public_message = public_message or self.default_public_message


class InvalidInputError(CredentialLifecycleError, ValueError):
    """Raised when a required field is missing or malformed."""

    failure = CredentialFailure.INVALID_INPUT
    default_public_message = "all fields are required"


class AccountConflictError(CredentialLifecycleError):
    """Raised when an account already exists for one email."""

    failure = CredentialFailure.CONFLICT
    default_public_message = "email already in use"

    def __init__(self, *, email: str) -> None:
        super().__init__(f"account already exists: {email}")
        self.email = email


class AccountNotFoundError(CredentialLifecycleError, LookupError):
    """Raised when no account matches the lookup key."""

    failure = CredentialFailure.NOT_FOUND
    default_public_message = "account not found"


class InvalidCredentialsError(CredentialLifecycleError, PermissionError):
    """Raised when a password does not match the stored hash."""

    failure = CredentialFailure.INVALID_CREDENTIALS
    default_public_message = LOGIN_FAILED_MESSAGE

    def __init__(self, *, email: str) -> None:
        super().__init__(f"password mismatch for account: {email}")
        self.email = email


class InvalidTokenError(CredentialLifecycleError, PermissionError):
    """Raised when a token is unknown for the account, expired, or fails verification."""

    failure = CredentialFailure.INVALID_TOKEN
    default_public_message = "invalid or expired token"


class AccountStoreUnavailableError(CredentialLifecycleError):
    """Raised when the account store cannot complete a call."""

    failure = CredentialFailure.STORE_UNAVAILABLE
    default_public_message = "service temporarily unavailable"
    transient = True
