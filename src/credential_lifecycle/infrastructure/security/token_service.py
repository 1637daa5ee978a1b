"""Signed token issuance and link helpers."""

from __future__ import annotations

import secrets
import time
from typing import Any
from urllib.parse import quote

import jwt

from credential_lifecycle.application.errors import InvalidTokenError
from credential_lifecycle.application.ports.token_issuer_port import (
    TokenClaims,
    TokenIssuerPort,
    TokenPurpose,
)

_ALGORITHM = "HS256"


class SignedTokenService(TokenIssuerPort):
    """Issue HS256 JWTs bound to per-call claims and embed them in links."""

    def __init__(self, *, secret: str, issuer: str, link_base_url: str) -> None:
        self._secret = secret
        self._issuer = issuer
        self._link_base_url = link_base_url.rstrip("/")

    def issue(self, claims: TokenClaims) -> str:
        """Create a signed token for the claims.

        Every token carries a random ``jti`` so no two issuances collide even
        for the same subject and second. ``exp`` is only present when the
        claims carry a TTL.
        """

        now = int(time.time())
        payload: dict[str, Any] = {
            "iss": self._issuer,
            "sub": claims.subject,
            "purpose": claims.purpose.value,
            "iat": now,
            "jti": secrets.token_urlsafe(16),
        }
        if claims.ttl_seconds is not None:
            payload["exp"] = now + claims.ttl_seconds
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def to_link(self, token: str) -> str:
        return f"{self._link_base_url}/{quote(token, safe='')}"

    def decode(self, token: str, *, purpose: TokenPurpose) -> dict[str, Any]:
        """Verify signature, issuer, expiry and purpose and return the payload.

        Raises
        ------
        InvalidTokenError
            When the token fails any check.
        """

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                issuer=self._issuer,
                options={"require": ["iss", "sub", "iat", "jti"]},
            )
        except jwt.PyJWTError as error:
            raise InvalidTokenError(f"token rejected: {error}") from error

        if payload.get("purpose") != purpose.value:
            raise InvalidTokenError(f"token purpose mismatch: expected {purpose.value}")
        return payload
