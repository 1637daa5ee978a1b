"""Account state enum for the credential lifecycle state machine."""

from __future__ import annotations

from enum import StrEnum


class AccountState(StrEnum):
    """Credential states an account moves through after registration."""

    UNVERIFIED = "UNVERIFIED"
    VERIFIED = "VERIFIED"
    RESET_PENDING = "RESET_PENDING"


def derive_account_state(*, is_verified: bool, verification_token: str | None) -> AccountState:
    """Return the state implied by persisted verification flag and pending token."""

    if not is_verified:
        return AccountState.UNVERIFIED
    if verification_token is None:
        return AccountState.VERIFIED
    return AccountState.RESET_PENDING
