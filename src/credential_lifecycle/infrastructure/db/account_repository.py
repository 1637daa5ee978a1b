"""SQLAlchemy adapter for account persistence."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Collection
from contextlib import asynccontextmanager
from datetime import datetime
from typing import cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from credential_lifecycle.application.errors import (
    AccountConflictError,
    AccountStoreUnavailableError,
)
from credential_lifecycle.application.ports.account_repository_port import (
    MUTABLE_ACCOUNT_FIELDS,
    AccountCreateInput,
    AccountRecord,
    AccountRepositoryPort,
)
from credential_lifecycle.infrastructure.db.metadata import accounts

logger = logging.getLogger(__name__)


def _is_duplicate_email_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "accounts.email" in message or "uq_accounts_email" in message


class SqlAlchemyAccountRepository(AccountRepositoryPort):
    """Account repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_email(self, *, email: str) -> AccountRecord | None:
        """Return account by exact email or None."""

        statement = sa.select(*accounts.c).where(accounts.c.email == email).limit(1)
        return await self._fetch_one(statement, operation="get_by_email")

    async def get_by_token(self, *, token: str) -> AccountRecord | None:
        """Return the account currently holding one token or None."""

        statement = sa.select(*accounts.c).where(accounts.c.verification_token == token).limit(1)
        return await self._fetch_one(statement, operation="get_by_token")

    async def get_by_email_and_token(self, *, email: str, token: str) -> AccountRecord | None:
        """Return account only when email and token match the same row."""

        statement = sa.select(*accounts.c).where(
            accounts.c.email == email,
            accounts.c.verification_token == token,
        ).limit(1)
        return await self._fetch_one(statement, operation="get_by_email_and_token")

    async def create_account(self, payload: AccountCreateInput) -> AccountRecord:
        """Insert one unverified account; the email unique constraint decides conflicts."""

        statement = sa.insert(accounts).values(
            id=payload.account_id,
            email=payload.email,
            password_hash=payload.password_hash,
            verification_token=payload.verification_token,
            token_issued_at=payload.token_issued_at,
            is_verified=False,
        ).returning(*accounts.c)

        async with self._session_scope(operation="create_account") as session:
            try:
                result = await session.execute(statement)
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                if _is_duplicate_email_error(error):
                    raise AccountConflictError(email=payload.email) from error
                raise

        row = result.mappings().one()
        return _to_account_record(row)

    async def save_account(
        self,
        account: AccountRecord,
        *,
        fields: Collection[str] | None = None,
    ) -> AccountRecord | None:
        """Persist the named mutable account fields keyed by email."""

        columns = MUTABLE_ACCOUNT_FIELDS if fields is None else tuple(fields)
        unknown = set(columns) - set(MUTABLE_ACCOUNT_FIELDS)
        if unknown:
            raise ValueError(f"not a mutable account field: {sorted(unknown)}")

        values: dict[str, object] = {name: getattr(account, name) for name in columns}
        values["updated_at"] = sa.func.current_timestamp()
        statement = (
            sa.update(accounts)
            .where(accounts.c.email == account.email)
            .values(values)
            .returning(*accounts.c)
        )

        async with self._session_scope(operation="save_account") as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().first()
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.warning("account_save_rejected email=%s reason=integrity", account.email)
                raise

        if row is None:
            return None
        return _to_account_record(row)

    async def _fetch_one(
        self,
        statement: sa.Select[tuple[object, ...]],
        *,
        operation: str,
    ) -> AccountRecord | None:
        async with self._session_scope(operation=operation) as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_account_record(row)

    @asynccontextmanager
    async def _session_scope(self, *, operation: str) -> AsyncIterator[AsyncSession]:
        """Open one session and translate driver failures into the store error."""

        try:
            async with self._session_factory() as session:
                yield session
        except (SQLAlchemyError, OSError) as error:
            logger.warning(
                "account_store_unavailable operation=%s error=%s",
                operation,
                type(error).__name__,
            )
            raise AccountStoreUnavailableError(
                f"account store failed during {operation}"
            ) from error


def _to_account_record(row: sa.RowMapping) -> AccountRecord:
    raw_account_id = row["id"]
    account_id = (
        raw_account_id if isinstance(raw_account_id, UUID) else UUID(str(raw_account_id))
    )
    return AccountRecord(
        account_id=account_id,
        email=cast(str, row["email"]),
        password_hash=cast(str, row["password_hash"]),
        verification_token=cast(str | None, row["verification_token"]),
        token_issued_at=cast(datetime | None, row["token_issued_at"]),
        is_verified=bool(row["is_verified"]),
        display_name=cast(str | None, row["display_name"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
