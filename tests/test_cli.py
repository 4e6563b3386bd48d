"""Tests for the command-line calculator."""

from __future__ import annotations

import json

import pytest

from campaign_billing.cli import (
    USAGE_ERROR,
    build_parser,
    format_json,
    format_table,
    main,
    parse_overrides,
)
from campaign_billing.config import get_settings
from campaign_billing.domain.models import CalculationOutput


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Read DEFAULT_MODEL_ID from the test environment, not a cached value."""
    monkeypatch.delenv("DEFAULT_MODEL_ID", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestBuildParser:
    """Argument parsing."""

    def test_model_with_overrides(self) -> None:
        args = build_parser().parse_args(
            ["--model", "FixedMetric", "--set", "totalBudget=1", "--set", "capBudget=no"]
        )
        assert args.model == "FixedMetric"
        assert args.overrides == ["totalBudget=1", "capBudget=no"]
        assert args.output_format == "table"
        assert args.list is False

    def test_list_and_model_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--list", "--model", "FixedMetric"])

    def test_no_action_evaluates_default(self) -> None:
        args = build_parser().parse_args([])
        assert args.list is False
        assert args.model is None

    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--list", "--format", "xml"])


class TestParseOverrides:
    """NAME=VALUE parsing."""

    def test_pairs(self) -> None:
        assert parse_overrides(["a=1", " b = two ", "buyMetricId=Flat Fee/Units"]) == {
            "a": "1",
            "b": "two",
            "buyMetricId": "Flat Fee/Units",
        }

    def test_empty_value_allowed(self) -> None:
        assert parse_overrides(["capBudget="]) == {"capBudget": ""}

    @pytest.mark.parametrize("pair", ["novalue", "=5"], ids=["no_equals", "no_name"])
    def test_invalid(self, pair: str) -> None:
        with pytest.raises(ValueError, match="Expected NAME=VALUE"):
            parse_overrides([pair])


class TestFormatters:
    """Table and JSON rendering."""

    def test_format_table(self) -> None:
        table = format_table(
            {
                "clientSpend": CalculationOutput(value=9000.0, formula="spend"),
                "toDateBudget": CalculationOutput(value="N/A", formula="n/a"),
            }
        )
        lines = table.splitlines()
        assert lines[0].startswith("Output")
        assert set(lines[1]) == {"-"}
        assert "9,000.00" in lines[2]
        assert lines[3].split()[:2] == ["toDateBudget", "N/A"]

    def test_format_table_empty(self) -> None:
        assert format_table({}) == "No outputs."

    def test_format_json(self) -> None:
        assert json.loads(format_json({"a": [1, "N/A"]})) == {"a": [1, "N/A"]}


class TestMain:
    """End-to-end CLI runs."""

    def test_list(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--list"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 9
        assert lines[0].startswith("FixedMetric")

    def test_list_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--list", "--format", "json"]) == 0
        records = json.loads(capsys.readouterr().out)
        assert [r["id"] for r in records][-1] == "ProjectService"

    def test_model_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--model", "MediaService"]) == 0
        out = capsys.readouterr().out
        assert "clientSpend" in out
        assert "9,200.00" in out

    def test_model_json_with_overrides(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(
            [
                "--model",
                "JobService",
                "--set",
                "daysElapsedInDateRange=15",
                "--format",
                "json",
            ]
        )
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["modelId"] == "JobService"
        assert payload["inputs"]["daysElapsedInDateRange"] == 15
        assert payload["outputs"]["clientSpend"]["value"] == pytest.approx(2500)
        assert payload["outputs"]["invoiceAmount"]["value"] == "N/A"

    def test_unknown_model(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--model", "Nope"]) == USAGE_ERROR
        assert "Pricing model 'Nope' not found" in capsys.readouterr().err

    def test_unknown_input(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--model", "FixedMetric", "--set", "serviceFeeRate=5"]) == USAGE_ERROR
        assert "no input 'serviceFeeRate'" in capsys.readouterr().err

    def test_malformed_override(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--model", "FixedMetric", "--set", "oops"]) == USAGE_ERROR
        assert "Expected NAME=VALUE" in capsys.readouterr().err


class TestConfiguredDefault:
    """DEFAULT_MODEL_ID selects the model evaluated without --model."""

    def test_first_model_without_configuration(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["--format", "json"]) == 0
        assert json.loads(capsys.readouterr().out)["modelId"] == "FixedMetric"

    def test_configured_default_evaluated(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("DEFAULT_MODEL_ID", "JobService")

        assert main(["--set", "daysElapsedInDateRange=15", "--format", "json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["modelId"] == "JobService"
        assert payload["outputs"]["clientSpend"]["value"] == pytest.approx(2500)

    def test_list_flags_configured_default(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("DEFAULT_MODEL_ID", "NoFeeService")

        assert main(["--list", "--format", "json"]) == 0
        records = json.loads(capsys.readouterr().out)
        assert [r["id"] for r in records if r["isDefault"]] == ["NoFeeService"]

    def test_list_table_marks_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--list"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].endswith("(default)")
        assert not any(line.endswith("(default)") for line in lines[1:])

    def test_unknown_configured_default(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("DEFAULT_MODEL_ID", "Retired")

        assert main([]) == USAGE_ERROR
        assert "Pricing model 'Retired' not found" in capsys.readouterr().err
