"""Prometheus metrics for the billing service.

Provides:
- ``setup_metrics(app)``: HTTP request metrics via
  prometheus-fastapi-instrumentator, exposed on ``/metrics``.
- ``EVALUATIONS``: evaluations served, labelled by model id.
- ``NOT_APPLICABLE_OUTPUTS``: outputs that came back ``"N/A"``, labelled by
  model id and output name.
- ``MODELS_REGISTERED``: pricing models available for selection.
"""

from __future__ import annotations

from collections.abc import Mapping

from fastapi import FastAPI
from prometheus_client import Counter, Gauge
from prometheus_fastapi_instrumentator import Instrumentator

from campaign_billing.domain.models import CalculationOutput

EVALUATIONS: Counter = Counter(
    "billing_evaluations_total",
    "Pricing model evaluations served",
    ["model_id"],
)

NOT_APPLICABLE_OUTPUTS: Counter = Counter(
    "billing_not_applicable_outputs_total",
    "Evaluated outputs reported as not applicable",
    ["model_id", "output"],
)

MODELS_REGISTERED: Gauge = Gauge(
    "billing_models_registered",
    "Pricing models available for selection",
)


def record_evaluation(model_id: str, outputs: Mapping[str, CalculationOutput]) -> None:
    """Count one evaluation of *model_id* and any not-applicable outputs."""
    EVALUATIONS.labels(model_id=model_id).inc()
    for name, output in outputs.items():
        if not output.is_applicable:
            NOT_APPLICABLE_OUTPUTS.labels(model_id=model_id, output=name).inc()


def setup_metrics(app: FastAPI) -> None:
    """Instrument *app* and expose ``/metrics``.

    Probe and metrics endpoints are excluded from HTTP instrumentation.
    """
    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=["/health", "/ready", "/metrics"],
    ).instrument(app).expose(app, include_in_schema=False, should_gzip=True)
