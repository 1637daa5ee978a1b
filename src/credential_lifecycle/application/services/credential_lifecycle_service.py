"""Application service for account registration, login, verification and password reset."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from credential_lifecycle.application.errors import (
    LOGIN_FAILED_MESSAGE,
    AccountConflictError,
    AccountNotFoundError,
    InvalidCredentialsError,
    InvalidInputError,
    InvalidTokenError,
)
from credential_lifecycle.application.ports.account_repository_port import (
    MUTABLE_ACCOUNT_FIELDS,
    AccountCreateInput,
    AccountRecord,
    AccountRepositoryPort,
)
from credential_lifecycle.application.ports.password_hasher_port import PasswordHasherPort
from credential_lifecycle.application.ports.token_issuer_port import (
    TokenClaims,
    TokenIssuerPort,
    TokenPurpose,
)
from credential_lifecycle.domain.account_state import AccountState
from credential_lifecycle.domain.auth.credentials import (
    require_email,
    require_login_password,
    require_password,
    require_token,
)
from credential_lifecycle.domain.transitions import assert_transition

logger = logging.getLogger(__name__)

DEFAULT_ACCESS_TOKEN_TTL_SECONDS = 3600


@dataclass(frozen=True)
class AccountView:
    """Account projection safe to hand to callers (no hash, no token)."""

    email: str
    display_name: str | None
    is_verified: bool
    state: AccountState
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: AccountRecord) -> AccountView:
        return cls(
            email=record.email,
            display_name=record.display_name,
            is_verified=record.is_verified,
            state=record.state,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


@dataclass(frozen=True)
class ProfileUpdate:
    """Profile fields a caller may change on an existing account."""

    display_name: str | None = None


@dataclass(frozen=True)
class RegistrationResult:
    """Registration result carrying the verification link for out-of-band delivery."""

    account: AccountView
    verification_link: str


@dataclass(frozen=True)
class AuthenticationResult:
    """Successful authentication result with an access token bound to the account."""

    account: AccountView
    access_token: str
    expires_in: int
    token_type: str = "bearer"


@dataclass(frozen=True)
class PasswordResetRequestResult:
    """Reset request result carrying the reset link for out-of-band delivery."""

    account: AccountView
    reset_link: str


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _require_input(validator: Callable[..., str], **field: str | None) -> str:
    try:
        return validator(**field)
    except ValueError as error:
        raise InvalidInputError(str(error)) from error


class CredentialLifecycleService:
    """Drive account credential state through the repository, hasher and token issuer.

    Operations hold no state between calls; the repository is the only shared
    resource. Failures are raised as ``CredentialLifecycleError`` subclasses and
    are never retried here.
    """

    def __init__(
        self,
        *,
        accounts: AccountRepositoryPort,
        password_hasher: PasswordHasherPort,
        token_issuer: TokenIssuerPort,
        access_token_ttl_seconds: int = DEFAULT_ACCESS_TOKEN_TTL_SECONDS,
        account_token_ttl: timedelta | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher
        self._token_issuer = token_issuer
        self._access_token_ttl_seconds = access_token_ttl_seconds
        self._account_token_ttl = account_token_ttl
        self._clock = clock or _utc_now

    async def register(self, *, email: str | None, password: str | None) -> RegistrationResult:
        """Create one unverified account and return its verification link.

        The pre-read only short-circuits the common duplicate case; the
        repository insert is what guarantees one account per email.
        """

        email = _require_input(require_email, email=email)
        password = _require_input(require_password, password=password)

        if await self._accounts.get_by_email(email=email) is not None:
            logger.info("account_register_conflict email=%s source=lookup", email)
            raise AccountConflictError(email=email)

        token = self._token_issuer.issue(
            TokenClaims(subject=email, purpose=TokenPurpose.VERIFICATION)
        )
        try:
            account = await self._accounts.create_account(
                AccountCreateInput(
                    account_id=uuid4(),
                    email=email,
                    password_hash=self._password_hasher.hash_password(password),
                    verification_token=token,
                    token_issued_at=self._clock(),
                )
            )
        except AccountConflictError:
            logger.info("account_register_conflict email=%s source=insert", email)
            raise

        logger.info("account_registered account_id=%s email=%s", account.account_id, email)
        return RegistrationResult(
            account=AccountView.from_record(account),
            verification_link=self._token_issuer.to_link(token),
        )

    async def authenticate(
        self,
        *,
        email: str | None,
        password: str | None,
    ) -> AuthenticationResult:
        """Check credentials and issue an access token bound to the account email.

        Unknown email and wrong password raise different error types but share
        one public message.
        """

        email = _require_input(require_email, email=email)
        password = _require_input(require_login_password, password=password)

        account = await self._accounts.get_by_email(email=email)
        if account is None:
            logger.info("account_login_failed email=%s reason=not_found", email)
            raise AccountNotFoundError(
                f"account not found: {email}",
                public_message=LOGIN_FAILED_MESSAGE,
            )

        is_valid = self._password_hasher.verify_password(
            password=password,
            password_hash=account.password_hash,
        )
        if not is_valid:
            logger.info("account_login_failed email=%s reason=invalid_credentials", email)
            raise InvalidCredentialsError(email=email)

        access_token = self._token_issuer.issue(
            TokenClaims(
                subject=account.email,
                purpose=TokenPurpose.ACCESS,
                ttl_seconds=self._access_token_ttl_seconds,
            )
        )
        logger.info("account_login_succeeded account_id=%s", account.account_id)
        return AuthenticationResult(
            account=AccountView.from_record(account),
            access_token=access_token,
            expires_in=self._access_token_ttl_seconds,
        )

    async def verify_account(self, *, token: str | None) -> AccountView:
        """Mark the account holding the token as verified and consume the token."""

        token = _require_input(require_token, token=token)

        account = await self._accounts.get_by_token(token=token)
        if account is None:
            logger.info("account_verify_failed reason=unknown_token")
            raise AccountNotFoundError("no account holds the verification token")
        self._require_fresh_token(account)

        saved = await self._persist(
            account,
            replace(account, is_verified=True, verification_token=None, token_issued_at=None),
        )
        logger.info("account_verified account_id=%s", saved.account_id)
        return AccountView.from_record(saved)

    async def view_profile(self, *, email: str | None) -> AccountView:
        """Return the public view of one account."""

        account = await self._require_account(email=email)
        return AccountView.from_record(account)

    async def update_profile(self, *, email: str | None, update: ProfileUpdate) -> AccountView:
        """Apply profile fields to one account. Email stays fixed."""

        account = await self._require_account(email=email)
        saved = await self._persist(account, replace(account, display_name=update.display_name))
        logger.info("account_profile_updated account_id=%s", saved.account_id)
        return AccountView.from_record(saved)

    async def change_password(
        self,
        *,
        email: str | None,
        new_password: str | None,
    ) -> AccountView:
        """Replace the password of an already-authenticated account.

        The current password is not re-checked. A pending reset token is
        cleared; an unverified account keeps its verification token.
        """

        new_password = _require_input(require_password, password=new_password)
        account = await self._require_account(email=email)

        updated = replace(account, password_hash=self._password_hasher.hash_password(new_password))
        if account.state is AccountState.RESET_PENDING:
            updated = replace(updated, verification_token=None, token_issued_at=None)

        saved = await self._persist(account, updated)
        logger.info("account_password_changed account_id=%s", saved.account_id)
        return AccountView.from_record(saved)

    async def request_password_reset(self, *, email: str | None) -> PasswordResetRequestResult:
        """Issue a reset token, replacing any token the account held, and return its link."""

        account = await self._require_account(email=email)

        token = self._token_issuer.issue(
            TokenClaims(subject=account.email, purpose=TokenPurpose.PASSWORD_RESET)
        )
        saved = await self._persist(
            account,
            replace(account, verification_token=token, token_issued_at=self._clock()),
        )
        logger.info("account_password_reset_requested account_id=%s", saved.account_id)
        return PasswordResetRequestResult(
            account=AccountView.from_record(saved),
            reset_link=self._token_issuer.to_link(token),
        )

    async def complete_password_reset(
        self,
        *,
        email: str | None,
        token: str | None,
        new_password: str | None,
    ) -> AccountView:
        """Replace the password when email and token match the same account.

        The token reached the account mailbox, so an unverified account is
        verified as part of the reset.
        """

        email = _require_input(require_email, email=email)
        token = _require_input(require_token, token=token)
        new_password = _require_input(require_password, password=new_password)

        account = await self._accounts.get_by_email_and_token(email=email, token=token)
        if account is None:
            logger.info("account_password_reset_failed email=%s reason=token_mismatch", email)
            raise InvalidTokenError(f"no account matches email and token: {email}")
        self._require_fresh_token(account)

        saved = await self._persist(
            account,
            replace(
                account,
                password_hash=self._password_hasher.hash_password(new_password),
                verification_token=None,
                token_issued_at=None,
                is_verified=True,
            ),
        )
        logger.info("account_password_reset_completed account_id=%s", saved.account_id)
        return AccountView.from_record(saved)

    async def _require_account(self, *, email: str | None) -> AccountRecord:
        """Return account by email or raise deterministic not-found error."""

        email = _require_input(require_email, email=email)
        account = await self._accounts.get_by_email(email=email)
        if account is None:
            raise AccountNotFoundError(f"account not found: {email}")
        return account

    async def _persist(self, current: AccountRecord, updated: AccountRecord) -> AccountRecord:
        """Guard the state change and save only the fields that changed."""

        assert_transition(current.state, updated.state)
        changed = [
            name
            for name in MUTABLE_ACCOUNT_FIELDS
            if getattr(current, name) != getattr(updated, name)
        ]
        saved = await self._accounts.save_account(updated, fields=changed)
        if saved is None:
            raise AccountNotFoundError(f"account not found: {current.email}")
        return saved

    def _require_fresh_token(self, account: AccountRecord) -> None:
        """Reject tokens older than the configured window, if one is configured."""

        if self._account_token_ttl is None:
            return

        issued_at = account.token_issued_at
        if issued_at is None:
            raise InvalidTokenError(f"token issuance time unknown: {account.email}")
        if issued_at.tzinfo is None:
            issued_at = issued_at.replace(tzinfo=UTC)
        if self._clock() - issued_at > self._account_token_ttl:
            logger.info("account_token_expired account_id=%s", account.account_id)
            raise InvalidTokenError(f"token expired: {account.email}")
