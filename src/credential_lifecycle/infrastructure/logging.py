"""Logging configuration for processes embedding the credential lifecycle service."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_PACKAGE_LOGGER = "credential_lifecycle"


def configure_logging(*, level: str) -> None:
    """Configure root handler format and apply the runtime level to package loggers.

    The package logger level is set explicitly so it applies even when the
    embedding process already configured the root logger.
    """

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved_level = getattr(logging, normalized_level, logging.INFO)

    logging.basicConfig(
        level=resolved_level,
        format=_LOG_FORMAT,
    )
    logging.getLogger(_PACKAGE_LOGGER).setLevel(resolved_level)
