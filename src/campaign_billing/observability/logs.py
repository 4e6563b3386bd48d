"""Structured logging setup and per-request log context.

``configure_logging`` renders JSON at INFO in production and a coloured
console at DEBUG in development. ``RequestIdMiddleware`` binds an
``X-Request-ID`` (echoed from the client or generated) into structlog
contextvars so every log line of a request carries the same ``request_id``.
"""

from __future__ import annotations

import logging
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from campaign_billing.observability.sentry import get_sentry_processor

SERVICE_NAME = "campaign-billing"
REQUEST_ID_HEADER = "X-Request-ID"


def configure_logging(production: bool = False, *, sentry_enabled: bool = False) -> None:
    """Configure structlog for production (JSON) or development (console).

    Args:
        production: Enable production rendering and INFO level if ``True``.
        sentry_enabled: Insert the Sentry forwarding processor.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
    ]
    if sentry_enabled:
        processors.append(get_sentry_processor())
    processors += [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        log_level = logging.DEBUG

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request/response cycle with a request ID."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, service=SERVICE_NAME)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
