from __future__ import annotations

import pytest

from credential_lifecycle.domain.auth.credentials import (
    MAX_PASSWORD_BYTES,
    require_email,
    require_login_password,
    require_password,
    require_token,
)


def test_email_is_returned_unchanged_including_case() -> None:
    assert require_email(email="User@Example.com") == "User@Example.com"


@pytest.mark.parametrize("email", [None, "", "   "])
def test_missing_email_is_rejected(email: str | None) -> None:
    with pytest.raises(ValueError, match="email is required"):
        require_email(email=email)


@pytest.mark.parametrize("password", [None, "", "  "])
def test_missing_password_is_rejected(password: str | None) -> None:
    with pytest.raises(ValueError, match="password is required"):
        require_password(password=password)


def test_password_keeps_surrounding_whitespace() -> None:
    assert require_password(password=" secret ") == " secret "


def test_password_over_bcrypt_limit_is_rejected() -> None:
    assert require_password(password="a" * MAX_PASSWORD_BYTES) == "a" * MAX_PASSWORD_BYTES
    with pytest.raises(ValueError, match="at most"):
        require_password(password="a" * (MAX_PASSWORD_BYTES + 1))


def test_password_limit_counts_utf8_bytes() -> None:
    with pytest.raises(ValueError, match="at most"):
        require_password(password="é" * 37)


@pytest.mark.parametrize("token", [None, "", " "])
def test_missing_token_is_rejected(token: str | None) -> None:
    with pytest.raises(ValueError, match="token is required"):
        require_token(token=token)


def test_login_password_has_no_length_limit() -> None:
    oversized = "a" * (MAX_PASSWORD_BYTES + 28)

    assert require_login_password(password=oversized) == oversized
    with pytest.raises(ValueError, match="password is required"):
        require_login_password(password=" ")
