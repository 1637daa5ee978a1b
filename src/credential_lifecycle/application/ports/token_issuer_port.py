"""Port for opaque token issuance and link construction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol


class TokenPurpose(StrEnum):
    """What one issued token may be used for."""

    ACCESS = "access"
    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True)
class TokenClaims:
    """Claims bound into one token, built fresh for every issuance."""

    subject: str
    purpose: TokenPurpose
    ttl_seconds: int | None = None


class TokenIssuerPort(Protocol):
    """Token issuance contract."""

    def issue(self, claims: TokenClaims) -> str:
        """Return an unguessable token bound to the supplied claims."""

    def to_link(self, token: str) -> str:
        """Return the URL that carries one token to the end user."""

    def decode(self, token: str, *, purpose: TokenPurpose) -> dict[str, Any]:
        """Return verified claims for a token issued with the given purpose."""
