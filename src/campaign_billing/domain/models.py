"""Pydantic v2 models for pricing model schemas, contexts, and outputs."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from campaign_billing.domain.types import (
    NOT_APPLICABLE,
    BuyMetric,
    InputKind,
    NotApplicable,
    OutputName,
)

InputValue = bool | float | str


def format_value(value: float | str) -> str:
    """Render a computed value for embedding in a formula trace.

    Whole floats drop their trailing ``.0`` and infinities render as
    ``Infinity`` so traces read the same as the figures shown to users.
    """
    if isinstance(value, str):
        return value
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if math.isnan(value):
        return "NaN"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class InputField(BaseModel):
    """One configurable input of a pricing model.

    Validates that the default matches the declared kind, that choice
    inputs carry their choices, and that numeric bounds are coherent.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str
    label: str
    kind: InputKind
    default_value: InputValue
    choices: tuple[str, ...] | None = None
    min_value: float | None = Field(default=None, alias="min")
    max_value: float | None = Field(default=None, alias="max")

    @model_validator(mode="after")
    def default_must_match_kind(self) -> InputField:
        """Ensure default, choices, and bounds agree with ``kind``."""
        default = self.default_value

        if self.kind is InputKind.BOOLEAN:
            if not isinstance(default, bool):
                raise ValueError(f"{self.name}: boolean input needs a bool default")
        elif self.kind is InputKind.NUMBER:
            if isinstance(default, bool) or not isinstance(default, (int, float)):
                raise ValueError(f"{self.name}: number input needs a numeric default")
        else:
            if not self.choices:
                raise ValueError(f"{self.name}: select input needs choices")
            if default not in self.choices:
                raise ValueError(
                    f"{self.name}: default {default!r} is not one of {list(self.choices)}"
                )

        has_bounds = self.min_value is not None or self.max_value is not None
        if has_bounds and self.kind is not InputKind.NUMBER:
            raise ValueError(f"{self.name}: min/max only apply to number inputs")
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise ValueError(
                f"{self.name}: min ({self.min_value}) must not exceed max ({self.max_value})"
            )
        if self.kind is InputKind.NUMBER:
            if self.min_value is not None and default < self.min_value:
                raise ValueError(f"{self.name}: default below min")
            if self.max_value is not None and default > self.max_value:
                raise ValueError(f"{self.name}: default above max")
        return self


class CalculationOutput(BaseModel):
    """Result of one named calculation.

    Attributes:
        value: The computed figure, or ``"N/A"`` when the model or inputs do
            not support the computation. Non-finite figures are stored as
            ``"N/A"``.
        formula: Derivation text with the computed value embedded.
    """

    model_config = ConfigDict(frozen=True)

    value: float | NotApplicable
    formula: str

    @field_validator("value", mode="before")
    @classmethod
    def non_finite_is_not_applicable(cls, v: object) -> object:
        if isinstance(v, float) and not math.isfinite(v):
            return NOT_APPLICABLE
        return v

    @property
    def is_applicable(self) -> bool:
        return self.value != NOT_APPLICABLE

    def display(self) -> str:
        """Two-decimal rendering of ``value``, or the sentinel unchanged."""
        if not self.is_applicable:
            return NOT_APPLICABLE
        return f"{self.value:,.2f}"


class CalculationContext(BaseModel):
    """Everything a calculation function may read during one evaluation.

    Every input any model declares is listed here with the default a
    formula falls back to when the caller left it unset. ``computed`` holds
    the plain numeric values of outputs already produced in the same
    evaluation pass, keyed by output name. Outputs that came back ``"N/A"``
    are not recorded, so later calculations see them as absent.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    total_budget: float = 0.0
    commission_rate: float = 0.0
    service_fee_rate: float = 0.0
    fixed_rate: float = 0.0
    buy_metric_id: BuyMetric = BuyMetric.CPM
    actual_delivered_units: float = 0.0
    actual_media_spend: float = 0.0
    pacing_from_ad_server: bool = False
    cap_budget: bool = True
    invoice_quantity: float = 0.0
    invoice_spend: float = 0.0
    amount_already_charged: float = 0.0
    total_days_in_placement: float = 0.0
    days_elapsed_in_date_range: float = 0.0
    computed: dict[str, float] = Field(default_factory=dict)

    @property
    def client_spend(self) -> float | None:
        """Computed ``clientSpend``; ``None`` before it runs or when it was ``"N/A"``."""
        return self.computed.get(OutputName.CLIENT_SPEND)

    @property
    def service_fee_amount(self) -> float | None:
        """Computed ``serviceFeeAmount``; ``None`` before it runs or when it was ``"N/A"``."""
        return self.computed.get(OutputName.SERVICE_FEE_AMOUNT)


CalculationFunction = Callable[[CalculationContext], CalculationOutput]


@dataclass(frozen=True)
class PricingModel:
    """A named billing scheme: input schema plus its ordered formula table.

    ``calculations`` is stored as a read-only mapping. Variants built with
    :meth:`derive` either share the parent's mapping object outright or get
    a fresh copy with specific entries replaced.
    """

    id: str
    name: str
    description: str
    inputs: tuple[InputField, ...]
    calculations: Mapping[str, CalculationFunction]
    is_project: bool = False
    _fields_by_name: Mapping[str, InputField] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.calculations, MappingProxyType):
            object.__setattr__(
                self, "calculations", MappingProxyType(dict(self.calculations))
            )
        object.__setattr__(self, "inputs", tuple(self.inputs))

        by_name: dict[str, InputField] = {}
        for input_field in self.inputs:
            if input_field.name in by_name:
                raise ValueError(f"{self.id}: duplicate input '{input_field.name}'")
            by_name[input_field.name] = input_field
        object.__setattr__(self, "_fields_by_name", MappingProxyType(by_name))

    def input_field(self, name: str) -> InputField | None:
        return self._fields_by_name.get(name)

    def default_inputs(self) -> dict[str, InputValue]:
        """Fresh input values seeded from every field's default."""
        return {f.name: f.default_value for f in self.inputs}

    def derive(
        self,
        *,
        id: str,
        name: str,
        description: str,
        inputs: Iterable[InputField] | None = None,
        overrides: Mapping[str, CalculationFunction] | None = None,
        is_project: bool | None = None,
    ) -> PricingModel:
        """Build a structural variant of this model.

        Overridden calculations replace the parent's entry for that key in
        place; key order is preserved. Without overrides the parent's
        calculation mapping is reused as-is.
        """
        calculations: Mapping[str, CalculationFunction] = self.calculations
        if overrides:
            calculations = {**self.calculations, **overrides}
        return PricingModel(
            id=id,
            name=name,
            description=description,
            inputs=tuple(self.inputs if inputs is None else inputs),
            calculations=calculations,
            is_project=self.is_project if is_project is None else is_project,
        )

    def override_input(self, name: str, **changes: Any) -> tuple[InputField, ...]:
        """Copy of ``inputs`` with the named field's attributes replaced."""
        if name not in self._fields_by_name:
            raise ValueError(f"{self.id}: no input '{name}' to override")
        return tuple(
            InputField.model_validate({**f.model_dump(), **changes})
            if f.name == name
            else f
            for f in self.inputs
        )
