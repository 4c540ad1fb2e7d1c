# =============================================================================
# lib/monitoring.py - Error Reporting
# =============================================================================
# Thin wrapper around sentry-sdk.
#
# Usage:
#   from lib.monitoring import init_sentry, report_exception
#
#   init_sentry()                       # once, at startup
#   report_exception(exc, path="/api")  # anywhere an error is swallowed
# =============================================================================

import logging
from typing import Any

import sentry_sdk

from app.config import settings

logger = logging.getLogger(__name__)


def init_sentry() -> bool:
    """
    Initialize Sentry when a DSN is configured.

    Returns:
        True if Sentry was initialized, False if reporting is disabled
    """
    if not settings.SENTRY_DSN:
        logger.info("SENTRY_DSN not set - error reporting disabled")
        return False

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        release=settings.APP_VERSION,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        debug=settings.DEBUG,
    )
    logger.info(f"Sentry initialized for {settings.ENVIRONMENT}")
    return True


def report_exception(exc: BaseException, **context: Any) -> str | None:
    """
    Send an exception to Sentry with extra context.

    Safe to call when Sentry is not initialized (the SDK drops the event).

    Returns:
        The Sentry event id, or None if nothing was sent
    """
    return sentry_sdk.capture_exception(exc, extras=context)
