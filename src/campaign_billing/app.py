"""Application entry point for the campaign billing HTTP service.

Configures:
- **structlog** with JSON rendering (production) or colored console (development)
- **Sentry** error forwarding when ``SENTRY_DSN`` is set
- **Prometheus** metrics on ``/metrics``
- **Request IDs** on every response and log line
- **Routes** for model discovery, evaluation, and health probes

Run with::

    python -m campaign_billing.app
"""

from __future__ import annotations

import sys

import structlog
import uvicorn
from fastapi import FastAPI

from campaign_billing.api.routes import router as billing_router
from campaign_billing.config import Settings, get_settings
from campaign_billing.domain.errors import ModelNotFoundError
from campaign_billing.health import register_health_routes
from campaign_billing.observability.logs import RequestIdMiddleware, configure_logging
from campaign_billing.observability.metrics import MODELS_REGISTERED, setup_metrics
from campaign_billing.observability.sentry import init_sentry
from campaign_billing.pricing.registry import MODEL_REGISTRY, lookup

logger = structlog.get_logger()


def validate_startup(settings: Settings) -> None:
    """Check that the configured default model exists.

    In **production** mode an unknown ``default_model_id`` stops the process.
    In **development** mode it is logged as a warning and the first
    registered model is used instead.

    Args:
        settings: The loaded application settings.
    """
    if not settings.default_model_id:
        logger.info("startup_validation_passed", models=len(MODEL_REGISTRY))
        return

    try:
        lookup(settings.default_model_id)
    except ModelNotFoundError:
        if settings.production:
            logger.error("default_model_unknown", model_id=settings.default_model_id)
            print("\n=== STARTUP FAILED ===", file=sys.stderr)
            print(
                f"DEFAULT_MODEL_ID '{settings.default_model_id}' is not a registered "
                "pricing model. Known models:",
                file=sys.stderr,
            )
            for model_id in MODEL_REGISTRY:
                print(f"  - {model_id}", file=sys.stderr)
            print("======================\n", file=sys.stderr)
            sys.exit(1)
        logger.warning("default_model_unknown_dev", model_id=settings.default_model_id)
        return

    logger.info("startup_validation_passed", models=len(MODEL_REGISTRY))


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI app with billing routes, probes, and observability.

    Args:
        settings: Application settings.  If ``None``, ``get_settings()`` is used.

    Returns:
        The configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    fastapi_app = FastAPI(title="Campaign Billing Calculator")
    fastapi_app.state.settings = settings
    fastapi_app.state.default_model_id = settings.default_model_id
    fastapi_app.add_middleware(RequestIdMiddleware)
    fastapi_app.include_router(billing_router)
    register_health_routes(fastapi_app)
    setup_metrics(fastapi_app)

    MODELS_REGISTERED.set(len(MODEL_REGISTRY))
    return fastapi_app


def main() -> None:
    """Load settings, configure logging and Sentry, and serve the API."""
    settings = get_settings()
    sentry_enabled = init_sentry(settings.sentry_dsn, production=settings.production)
    configure_logging(production=settings.production, sentry_enabled=sentry_enabled)
    validate_startup(settings)

    app = create_app(settings)
    logger.info(
        "Starting billing API",
        host=settings.api_host,
        port=settings.api_port,
        production=settings.production,
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level="info")


if __name__ == "__main__":
    main()
