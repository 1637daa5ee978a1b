"""Deterministic transition guards for account states."""

from __future__ import annotations

from typing import Final

from credential_lifecycle.domain.account_state import AccountState


class InvalidAccountTransitionError(ValueError):
    """Raised when an attempted account state transition is not allowed."""


# Self-loops cover token re-issue and password replacement without a state change.
_ALLOWED_TRANSITIONS: Final[dict[AccountState, frozenset[AccountState]]] = {
    AccountState.UNVERIFIED: frozenset({AccountState.UNVERIFIED, AccountState.VERIFIED}),
    AccountState.VERIFIED: frozenset({AccountState.VERIFIED, AccountState.RESET_PENDING}),
    AccountState.RESET_PENDING: frozenset(
        {AccountState.RESET_PENDING, AccountState.VERIFIED}
    ),
}


def can_transition(from_state: AccountState, to_state: AccountState) -> bool:
    """Return whether the transition is valid for the account state machine."""

    allowed_targets = _ALLOWED_TRANSITIONS[from_state]
    return to_state in allowed_targets


def assert_transition(from_state: AccountState, to_state: AccountState) -> None:
    """Assert a transition is allowed, else raise deterministic domain error."""

    if not can_transition(from_state, to_state):
        raise InvalidAccountTransitionError(
            f"Invalid account state transition: {from_state.value} -> {to_state.value}"
        )
