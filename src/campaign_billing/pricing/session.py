"""Caller-side input handling: coercion, clamping, and the calculator session.

The engine trusts its inputs. Callers holding raw user values (form text,
query parameters, JSON bodies) run them through ``coerce_input`` first so
numbers are parsed and clamped to the field's bounds before evaluation.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

import structlog

from campaign_billing.domain.errors import UnknownInputError
from campaign_billing.domain.models import (
    CalculationOutput,
    InputField,
    InputValue,
    PricingModel,
)
from campaign_billing.domain.types import InputKind
from campaign_billing.pricing.engine import evaluate
from campaign_billing.pricing.registry import default_model, lookup

logger = structlog.get_logger()

_TRUTHY = frozenset({"true", "1", "yes", "on"})
_FALSY = frozenset({"false", "0", "no", "off", ""})


def parse_float_or_zero(raw: object) -> float:
    """Parse ``raw`` as a float; unparsable or non-finite values become 0."""
    if isinstance(raw, bool):
        return 0.0
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def coerce_input(field: InputField, raw: object) -> InputValue:
    """Convert a raw caller value into a well-typed value for ``field``.

    Numbers are parsed (unparsable text becomes 0) and clamped to
    ``[min, max]``. Choice values not in ``choices`` fall back to the
    field default. Booleans accept common textual spellings.

    Args:
        field: The input field being set.
        raw: The raw value supplied by the caller.

    Returns:
        The coerced value.
    """
    if field.kind is InputKind.NUMBER:
        value = parse_float_or_zero(raw)
        if field.min_value is not None and value < field.min_value:
            value = field.min_value
        if field.max_value is not None and value > field.max_value:
            value = field.max_value
        return value

    if field.kind is InputKind.SELECT:
        text = str(raw)
        if field.choices and text in field.choices:
            return text
        return field.default_value

    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(raw)
    text = str(raw).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    return field.default_value


def coerce_inputs(model: PricingModel, raw: Mapping[str, object]) -> dict[str, InputValue]:
    """Coerce a mapping of raw values against ``model``'s schema.

    Unset inputs take their schema defaults.

    Raises:
        UnknownInputError: If ``raw`` names an input ``model`` does not declare.
    """
    values = model.default_inputs()
    for name, raw_value in raw.items():
        field = model.input_field(name)
        if field is None:
            raise UnknownInputError(str(model.id), name)
        values[name] = coerce_input(field, raw_value)
    return values


class CalculatorSession:
    """Interactive calculator state: one selected model and its input values.

    Selecting a model (including re-selecting the current one) resets the
    inputs to that model's schema defaults. Outputs are recomputed in full
    on every request.

    Args:
        model_id: Model to start on. When omitted the session starts on
            ``default_model_id``, or the first registered model if that is
            empty too.
        default_model_id: Configured default, usually
            ``Settings.default_model_id``.
    """

    def __init__(self, model_id: str | None = None, *, default_model_id: str = "") -> None:
        self._model = lookup(model_id) if model_id else default_model(default_model_id)
        self._inputs = self._model.default_inputs()

    @property
    def model(self) -> PricingModel:
        return self._model

    @property
    def inputs(self) -> dict[str, InputValue]:
        return dict(self._inputs)

    def select(self, model_id: str) -> PricingModel:
        """Switch to ``model_id`` and reset inputs to its defaults.

        Raises:
            ModelNotFoundError: If ``model_id`` is not registered.
        """
        self._model = lookup(model_id)
        self._inputs = self._model.default_inputs()
        logger.debug("model_selected", model_id=str(self._model.id))
        return self._model

    def update(self, name: str, raw: object) -> InputValue:
        """Coerce and store one input value.

        Raises:
            UnknownInputError: If the selected model has no input ``name``.
        """
        field = self._model.input_field(name)
        if field is None:
            raise UnknownInputError(str(self._model.id), name)
        value = coerce_input(field, raw)
        self._inputs[name] = value
        return value

    def outputs(self) -> dict[str, CalculationOutput]:
        return evaluate(self._model, self._inputs)
