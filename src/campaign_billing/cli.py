"""Command-line calculator for the pricing models.

Lists the registered models or evaluates one against input overrides.
Overrides are coerced and clamped exactly as the HTTP API does. Output
formats: table (default) or JSON.

Without ``--model`` the configured default model (``DEFAULT_MODEL_ID``, else
the first registered model) is evaluated.

Usage::

    python -m campaign_billing.cli --list
    python -m campaign_billing.cli --set totalBudget=20000
    python -m campaign_billing.cli --model FixedMetric --set totalBudget=20000 --set buyMetricId=CPC
    python -m campaign_billing.cli --model JobService --set daysElapsedInDateRange=15 --format json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from campaign_billing.config import get_settings
from campaign_billing.domain.errors import BillingError
from campaign_billing.domain.models import CalculationOutput
from campaign_billing.pricing.engine import evaluate
from campaign_billing.pricing.registry import default_model, describe, list_models, lookup
from campaign_billing.pricing.session import coerce_inputs

# Exit status for usage and lookup errors, matching argparse
USAGE_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the calculator.

    Returns:
        A configured :class:`argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(description="Evaluate campaign pricing models")

    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--list",
        action="store_true",
        help="List registered pricing models",
    )
    action.add_argument(
        "--model",
        type=str,
        help="Pricing model identifier to evaluate (default: the configured default model)",
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        dest="overrides",
        help="Override an input value; may be repeated",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["table", "json"],
        default="table",
        dest="output_format",
        help="Output format (default: table)",
    )

    return parser


def configure_cli_logging() -> None:
    """Send warnings and errors to stderr so stdout carries only results."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def parse_overrides(pairs: Sequence[str]) -> dict[str, str]:
    """Split ``NAME=VALUE`` strings into a mapping.

    Raises:
        ValueError: If an entry has no ``=`` or an empty name.
    """
    overrides: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            msg = f"Expected NAME=VALUE, got {pair!r}"
            raise ValueError(msg)
        overrides[name.strip()] = value.strip()
    return overrides


def format_table(outputs: Mapping[str, CalculationOutput]) -> str:
    """Format outputs as an aligned table of name, value, and formula."""
    if not outputs:
        return "No outputs."

    name_width = max(len("Output"), *(len(name) for name in outputs))
    values = {name: o.display() for name, o in outputs.items()}
    value_width = max(len("Value"), *(len(v) for v in values.values()))

    header = f"{'Output'.ljust(name_width)}  {'Value'.rjust(value_width)}  Formula"
    lines = [header, "-" * len(header)]
    for name, output in outputs.items():
        lines.append(
            f"{name.ljust(name_width)}  {values[name].rjust(value_width)}  {output.formula}"
        )
    return "\n".join(lines)


def format_model_list(models: Sequence[dict[str, Any]]) -> str:
    """Format discovery records as ``id  name  description`` lines.

    The default model's line ends with ``(default)``.
    """
    id_width = max(len(m["id"]) for m in models)
    name_width = max(len(m["name"]) for m in models)
    return "\n".join(
        f"{m['id'].ljust(id_width)}  {m['name'].ljust(name_width)}  {m['description']}"
        + ("  (default)" if m.get("isDefault") else "")
        for m in models
    )


def format_json(payload: Any) -> str:
    """Pretty-print *payload* as JSON."""
    return json.dumps(payload, indent=2)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, evaluate or list models, and print the result.

    Returns:
        Process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging()

    default_model_id = get_settings().default_model_id

    if args.list:
        default_id = default_model_id or str(default_model().id)
        models = [
            describe(model, is_default=model_id == default_id)
            for model_id, model in list_models()
        ]
        output = format_json(models) if args.output_format == "json" else format_model_list(models)
        print(output)
        return 0

    try:
        model = lookup(args.model) if args.model else default_model(default_model_id)
        inputs = coerce_inputs(model, parse_overrides(args.overrides))
    except (BillingError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return USAGE_ERROR

    outputs = evaluate(model, inputs)
    if args.output_format == "json":
        output = format_json(
            {
                "modelId": str(model.id),
                "inputs": inputs,
                "outputs": {
                    name: {"value": o.value, "formula": o.formula}
                    for name, o in outputs.items()
                },
            }
        )
    else:
        output = format_table(outputs)
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
