from __future__ import annotations

import pytest

from credential_lifecycle.domain.account_state import AccountState, derive_account_state
from credential_lifecycle.domain.transitions import (
    InvalidAccountTransitionError,
    assert_transition,
    can_transition,
)


@pytest.mark.parametrize(
    ("is_verified", "verification_token", "expected"),
    [
        (False, "token", AccountState.UNVERIFIED),
        (False, None, AccountState.UNVERIFIED),
        (True, None, AccountState.VERIFIED),
        (True, "token", AccountState.RESET_PENDING),
    ],
)
def test_state_is_derived_from_flag_and_token(
    is_verified: bool,
    verification_token: str | None,
    expected: AccountState,
) -> None:
    state = derive_account_state(is_verified=is_verified, verification_token=verification_token)

    assert state is expected


@pytest.mark.parametrize(
    ("from_state", "to_state"),
    [
        (AccountState.UNVERIFIED, AccountState.VERIFIED),
        (AccountState.UNVERIFIED, AccountState.UNVERIFIED),
        (AccountState.VERIFIED, AccountState.RESET_PENDING),
        (AccountState.VERIFIED, AccountState.VERIFIED),
        (AccountState.RESET_PENDING, AccountState.VERIFIED),
        (AccountState.RESET_PENDING, AccountState.RESET_PENDING),
    ],
)
def test_allowed_transitions_pass(from_state: AccountState, to_state: AccountState) -> None:
    assert_transition(from_state, to_state)


@pytest.mark.parametrize(
    ("from_state", "to_state"),
    [
        (AccountState.VERIFIED, AccountState.UNVERIFIED),
        (AccountState.RESET_PENDING, AccountState.UNVERIFIED),
        (AccountState.UNVERIFIED, AccountState.RESET_PENDING),
    ],
)
def test_disallowed_transitions_raise(from_state: AccountState, to_state: AccountState) -> None:
    assert can_transition(from_state, to_state) is False
    with pytest.raises(InvalidAccountTransitionError, match="Invalid account state transition"):
        assert_transition(from_state, to_state)
