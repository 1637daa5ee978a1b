"""Composition root wiring the credential lifecycle service from settings."""

from __future__ import annotations

import logging
from datetime import timedelta

from credential_lifecycle.application.services.credential_lifecycle_service import (
    CredentialLifecycleService,
)
from credential_lifecycle.config.settings import Settings, load_settings
from credential_lifecycle.infrastructure.db.account_repository import SqlAlchemyAccountRepository
from credential_lifecycle.infrastructure.db.session import create_session_factory
from credential_lifecycle.infrastructure.logging import configure_logging
from credential_lifecycle.infrastructure.security.password_hasher import BcryptPasswordHasher
from credential_lifecycle.infrastructure.security.token_service import SignedTokenService

logger = logging.getLogger(__name__)


def build_token_service(settings: Settings) -> SignedTokenService:
    """Build the signed token service from token and link settings."""

    return SignedTokenService(
        secret=settings.token_signing_secret,
        issuer=settings.token_issuer,
        link_base_url=str(settings.account_link_base_url),
    )


def build_credential_lifecycle_service(
    settings: Settings | None = None,
) -> CredentialLifecycleService:
    """Build the lifecycle service with SQLAlchemy, bcrypt and signed-token dependencies."""

    if settings is None:
        settings = load_settings()
    configure_logging(level=settings.log_level)

    account_token_ttl = (
        timedelta(seconds=settings.account_token_ttl_seconds)
        if settings.account_token_ttl_seconds is not None
        else None
    )
    session_factory = create_session_factory(settings.database_url)
    service = CredentialLifecycleService(
        accounts=SqlAlchemyAccountRepository(session_factory),
        password_hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
        token_issuer=build_token_service(settings),
        access_token_ttl_seconds=settings.access_token_ttl_seconds,
        account_token_ttl=account_token_ttl,
    )
    logger.info(
        "credential_lifecycle_service_built bcrypt_rounds=%s account_token_ttl_seconds=%s",
        settings.bcrypt_rounds,
        settings.account_token_ttl_seconds,
    )
    return service
