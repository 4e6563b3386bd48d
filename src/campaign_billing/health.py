"""Health and readiness endpoints for container orchestration.

Provides two top-level routes:

- ``GET /health`` -- Liveness probe.  Returns 200 if the process is alive.
- ``GET /ready``  -- Readiness probe.  Returns 200 only when the model
  registry is populated **and** the configured default model resolves.
  Returns 503 with per-check details otherwise.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from campaign_billing.domain.errors import ModelNotFoundError
from campaign_billing.pricing.registry import MODEL_REGISTRY, lookup


def register_health_routes(app: FastAPI) -> None:
    """Register ``/health`` and ``/ready`` endpoints on *app*.

    Args:
        app: The FastAPI application instance.
    """

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe -- always returns 200 if the process is running."""
        return {"status": "healthy"}

    @app.get("/ready")
    async def ready(request: Request) -> JSONResponse:
        """Readiness probe -- checks the registry and the default model."""
        checks: dict[str, str] = {}

        checks["registry"] = "ok" if len(MODEL_REGISTRY) > 0 else "fail"

        default_model_id = getattr(request.app.state, "default_model_id", "")
        if default_model_id:
            try:
                lookup(default_model_id)
                checks["default_model"] = "ok"
            except ModelNotFoundError:
                checks["default_model"] = "fail"
        else:
            checks["default_model"] = "ok"

        all_ok = all(v == "ok" for v in checks.values())
        status = "ready" if all_ok else "not_ready"
        code = 200 if all_ok else 503

        return JSONResponse(content={"status": status, "checks": checks}, status_code=code)
