"""Shared validation helpers for credential inputs."""

from __future__ import annotations

# bcrypt only reads the first 72 bytes and current releases reject longer input.
MAX_PASSWORD_BYTES = 72


def require_email(*, email: str | None) -> str:
    """Return the email unchanged and reject missing or blank values.

    Emails are case-sensitive identifiers, so no case folding happens here.
    """

    if email is None or not email.strip():
        raise ValueError("email is required")
    return email


def require_password(*, password: str | None) -> str:
    """Return the plaintext password unchanged and reject missing or oversized values."""

    password = require_login_password(password=password)
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


def require_login_password(*, password: str | None) -> str:
    """Return a presented password unchanged, rejecting only missing or blank values.

    No length limit applies to a login attempt; an oversized password fails
    verification instead.
    """

    if password is None or not password.strip():
        raise ValueError("password is required")
    return password


def require_token(*, token: str | None) -> str:
    """Return the opaque token unchanged and reject missing or blank values."""

    if token is None or not token.strip():
        raise ValueError("token is required")
    return token
