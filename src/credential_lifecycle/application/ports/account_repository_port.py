"""Port for account persistence operations used by the credential lifecycle."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from credential_lifecycle.domain.account_state import AccountState, derive_account_state

MUTABLE_ACCOUNT_FIELDS = (
    "password_hash",
    "verification_token",
    "token_issued_at",
    "is_verified",
    "display_name",
)


@dataclass(frozen=True)
class AccountCreateInput:
    """Input payload for inserting one unverified account."""

    account_id: UUID
    email: str
    password_hash: str
    verification_token: str
    token_issued_at: datetime


@dataclass(frozen=True)
class AccountRecord:
    """Account persistence model."""

    account_id: UUID
    email: str
    password_hash: str
    verification_token: str | None
    token_issued_at: datetime | None
    is_verified: bool
    display_name: str | None
    created_at: datetime
    updated_at: datetime

    @property
    def state(self) -> AccountState:
        return derive_account_state(
            is_verified=self.is_verified,
            verification_token=self.verification_token,
        )


class AccountRepositoryPort(Protocol):
    """Account repository contract.

    Every method may raise ``AccountStoreUnavailableError`` when the backing
    store fails.
    """

    async def get_by_email(self, *, email: str) -> AccountRecord | None:
        """Return account by exact email or None."""

    async def get_by_token(self, *, token: str) -> AccountRecord | None:
        """Return the account currently holding one token or None."""

    async def get_by_email_and_token(self, *, email: str, token: str) -> AccountRecord | None:
        """Return account only when both email and token match the same row."""

    async def create_account(self, payload: AccountCreateInput) -> AccountRecord:
        """Insert one account atomically, raising AccountConflictError on duplicate email."""

    async def save_account(
        self,
        account: AccountRecord,
        *,
        fields: Collection[str] | None = None,
    ) -> AccountRecord | None:
        """Persist mutable fields of one account keyed by email; None when no row matched.

        ``fields`` limits the write to the named columns so concurrent updates of
        other columns survive; ``None`` writes every mutable field.
        """
