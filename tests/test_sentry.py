"""Tests for Sentry SDK initialization and the structlog-sentry bridge."""

from __future__ import annotations

from unittest.mock import patch

from pydantic import SecretStr

from campaign_billing.observability.sentry import get_sentry_processor, init_sentry

TEST_DSN = "https://examplePublicKey@o0.ingest.sentry.io/0"


def test_init_sentry_noop_with_empty_dsn() -> None:
    """An empty DSN leaves Sentry disabled."""
    with patch("campaign_billing.observability.sentry.sentry_sdk.init") as mock_init:
        assert init_sentry("") is False
        assert init_sentry(SecretStr("")) is False
        mock_init.assert_not_called()


def test_init_sentry_calls_sdk_with_dsn() -> None:
    """A plain DSN is passed through with development defaults."""
    with patch("campaign_billing.observability.sentry.sentry_sdk.init") as mock_init:
        assert init_sentry(TEST_DSN) is True
        mock_init.assert_called_once()
        kwargs = mock_init.call_args.kwargs
        assert kwargs["dsn"] == TEST_DSN
        assert kwargs["environment"] == "development"
        assert kwargs["send_default_pii"] is False
        assert kwargs["traces_sample_rate"] == 0.1


def test_init_sentry_unwraps_secret_and_tags_production() -> None:
    with patch("campaign_billing.observability.sentry.sentry_sdk.init") as mock_init:
        assert init_sentry(SecretStr(TEST_DSN), production=True) is True
        kwargs = mock_init.call_args.kwargs
        assert kwargs["dsn"] == TEST_DSN
        assert kwargs["environment"] == "production"


def test_get_sentry_processor_returns_callable() -> None:
    assert callable(get_sentry_processor())
