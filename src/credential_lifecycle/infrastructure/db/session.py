"""Async SQLAlchemy session factory helpers."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# SQLite serializes writers; concurrent registrations wait on the lock instead of failing.
_SQLITE_BUSY_TIMEOUT_SECONDS = 30.0


def create_session_factory(database_url: str) -> async_sessionmaker[AsyncSession]:
    """Create a reusable async session factory for the provided database URL."""

    connect_args: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args["timeout"] = _SQLITE_BUSY_TIMEOUT_SECONDS

    engine = create_async_engine(database_url, connect_args=connect_args)
    return async_sessionmaker(engine, expire_on_commit=False)
