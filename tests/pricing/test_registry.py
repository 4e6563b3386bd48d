"""Tests for the pricing model registry."""

from __future__ import annotations

import pytest

from campaign_billing.domain.errors import ModelNotFoundError
from campaign_billing.domain.types import ModelId
from campaign_billing.pricing.fixed_metric import FIXED_METRIC
from campaign_billing.pricing.registry import (
    MODEL_REGISTRY,
    default_model,
    describe,
    list_models,
    lookup,
)


class TestRegistry:
    """Registry contents, order, and immutability."""

    def test_selection_order(self) -> None:
        assert list(MODEL_REGISTRY) == [
            "FixedMetric",
            "HdGrossInvoiceGrossFee",
            "HdNetInvoiceGrossFee",
            "HdNetInvoiceNetFee",
            "JobService",
            "ManagedService",
            "MediaService",
            "NoFeeService",
            "ProjectService",
        ]

    def test_every_model_id_registered(self) -> None:
        assert set(MODEL_REGISTRY) == {m.value for m in ModelId}

    def test_keys_match_model_ids(self) -> None:
        for model_id, model in MODEL_REGISTRY.items():
            assert model.id == model_id

    def test_read_only(self) -> None:
        with pytest.raises(TypeError):
            MODEL_REGISTRY["Extra"] = FIXED_METRIC  # type: ignore[index]

    def test_list_models(self) -> None:
        pairs = list_models()
        assert len(pairs) == 9
        assert pairs[0] == ("FixedMetric", FIXED_METRIC)

    def test_default_model(self) -> None:
        assert default_model() is FIXED_METRIC

    def test_configured_default_model(self) -> None:
        assert default_model("MediaService").id == ModelId.MEDIA_SERVICE
        assert default_model("") is FIXED_METRIC

    def test_unknown_configured_default(self) -> None:
        with pytest.raises(ModelNotFoundError):
            default_model("Retired")

    def test_only_project_service_is_project(self) -> None:
        assert [m.id for m in MODEL_REGISTRY.values() if m.is_project] == ["ProjectService"]


class TestLookup:
    """Lookup by identifier."""

    def test_known(self) -> None:
        assert lookup("MediaService").id == ModelId.MEDIA_SERVICE

    def test_accepts_enum(self) -> None:
        assert lookup(ModelId.JOB_SERVICE).name == "Job Service"

    @pytest.mark.parametrize("model_id", ["", "fixedmetric", "Unknown"])
    def test_unknown_raises(self, model_id: str) -> None:
        with pytest.raises(ModelNotFoundError) as exc_info:
            lookup(model_id)
        assert exc_info.value.model_id == model_id


class TestDescribe:
    """Discovery records."""

    def test_fixed_metric_record(self) -> None:
        record = describe(FIXED_METRIC)
        assert record["id"] == "FixedMetric"
        assert record["name"] == "Fixed Metric"
        assert record["isProject"] is False
        assert record["outputs"] == [
            "targetDelivery",
            "actualDelivery",
            "clientSpend",
            "mediaSpend",
            "netBudget",
            "toDateBudget",
            "invoiceAmount",
        ]

    def test_default_flag(self) -> None:
        assert describe(FIXED_METRIC)["isDefault"] is False
        assert describe(FIXED_METRIC, is_default=True)["isDefault"] is True

    def test_input_records_use_wire_names(self) -> None:
        inputs = {i["name"]: i for i in describe(FIXED_METRIC)["inputs"]}
        commission = inputs["commissionRate"]
        assert commission["defaultValue"] == 15
        assert commission["min"] == 0
        assert commission["max"] == 99.99
        assert commission["kind"] == "number"
        assert "choices" not in commission
        assert inputs["buyMetricId"]["choices"] == [
            "CPM",
            "CPC",
            "CPA",
            "CPCV",
            "Flat Fee/Units",
        ]
        assert "min" not in inputs["capBudget"]
