"""Sentry error reporting for the billing service.

Sentry stays disabled unless a DSN is configured. Errors reach Sentry via
the structlog processor returned by ``get_sentry_processor``; Sentry's own
stdlib logging capture is turned off so nothing is reported twice.
"""

from __future__ import annotations

import logging

import sentry_sdk
import structlog
from pydantic import SecretStr
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog_sentry import SentryProcessor


def init_sentry(dsn: SecretStr | str, *, production: bool = False) -> bool:
    """Initialize the Sentry SDK when *dsn* is non-empty.

    Args:
        dsn: Sentry DSN, plain or wrapped in ``SecretStr``.
        production: Tags events with the ``production`` environment when
            ``True``, ``development`` otherwise.

    Returns:
        ``True`` if Sentry was initialized, ``False`` if it stays disabled.
    """
    raw_dsn = dsn.get_secret_value() if isinstance(dsn, SecretStr) else dsn
    if not raw_dsn:
        return False

    sentry_sdk.init(
        dsn=raw_dsn,
        environment="production" if production else "development",
        traces_sample_rate=0.1,
        send_default_pii=False,
        integrations=[LoggingIntegration(event_level=None, level=None)],
    )
    return True


def get_sentry_processor() -> structlog.types.Processor:
    """Structlog processor forwarding ERROR-level events to Sentry.

    Belongs after ``add_log_level`` and before the renderer.
    """
    return SentryProcessor(event_level=logging.ERROR)
