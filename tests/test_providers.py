# tests/test_providers.py
"""
Provider Tests - Unit Tests for the Open Exchange Rates Client

This module contains unit tests for OpenExchangeRatesProvider, including
payload validation, retry with exponential backoff and error reporting.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxhistory.adapters.providers.openexchange (OpenExchangeRatesProvider for testing)
- fxhistory.domain.errors (InvalidRateError, ProviderUnavailableError)
- tenacity (its sleep is patched so retries run instantly)
- unittest.mock (Mock for API mocking)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from unittest.mock import Mock, call, patch  # Mock objects and patching for testing without real API calls
import requests  # HTTP library (used for mocking responses)

from fxhistory.adapters.providers.openexchange import OpenExchangeRatesProvider
from fxhistory.domain.errors import InvalidRateError, ProviderUnavailableError

APP_ID = "0123456789abcdef"


def _response(payload=None, status=200, json_error=None):
    resp = Mock()
    resp.ok = 200 <= status < 300
    resp.status_code = status
    resp.reason = "OK" if resp.ok else "Server Error"
    resp.text = "" if resp.ok else "upstream exploded"
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return resp


def _provider(**kwargs):
    options = dict(app_id=APP_ID, base_url="https://oxr.test/api/", timeout=5, retries=3, backoff=1.0)
    options.update(kwargs)
    return OpenExchangeRatesProvider(**options)


class TestInit:
    def test_explicit_values(self):
        provider = _provider()
        assert provider.base_url == "https://oxr.test/api"
        assert provider.timeout == 5
        assert provider.retries == 3
        assert provider.backoff == 1.0

    def test_missing_app_id(self):
        with patch("fxhistory.adapters.providers.openexchange.settings") as mock_settings:
            mock_settings.oxr_app_id = ""
            with pytest.raises(ValueError, match="app id not configured"):
                OpenExchangeRatesProvider()


@patch("tenacity.nap.time.sleep")
@patch("fxhistory.adapters.providers.openexchange.requests.get")
class TestLatest:
    def test_success(self, mock_get, mock_sleep):
        mock_get.return_value = _response({
            "disclaimer": "...",
            "license": "...",
            "timestamp": 1704888000,
            "base": "USD",
            "rates": {"EUR": 0.91},
        })

        data = _provider().latest()

        assert data == {"timestamp": 1704888000, "base": "USD", "rates": {"EUR": 0.91}}
        mock_get.assert_called_once_with(
            "https://oxr.test/api/latest.json", params={"app_id": APP_ID}, timeout=5
        )
        mock_sleep.assert_not_called()

    def test_retry_then_success(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            requests.exceptions.ConnectionError("reset"),
            _response({"timestamp": 1, "base": "USD", "rates": {}}),
        ]

        assert _provider().latest()["base"] == "USD"
        assert mock_get.call_count == 2
        mock_sleep.assert_called_once_with(1.0)

    def test_backoff_doubles_and_gives_up(self, mock_get, mock_sleep):
        mock_get.return_value = _response(status=503)

        with pytest.raises(ProviderUnavailableError, match="failed after 3 attempts"):
            _provider().latest()

        assert mock_get.call_count == 3
        assert mock_sleep.call_args_list == [call(1.0), call(2.0)]

    def test_backoff_scales_with_initial_delay(self, mock_get, mock_sleep):
        mock_get.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(ProviderUnavailableError, match="failed after 4 attempts: slow"):
            _provider(retries=4, backoff=0.5).latest()

        assert mock_sleep.call_args_list == [call(0.5), call(1.0), call(2.0)]

    def test_unexpected_error_is_not_retried(self, mock_get, mock_sleep):
        mock_get.side_effect = KeyError("boom")

        with pytest.raises(KeyError):
            _provider().latest()

        assert mock_get.call_count == 1
        mock_sleep.assert_not_called()

    def test_invalid_json_counts_as_failure(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            _response(json_error=ValueError("Invalid JSON")),
            _response({"timestamp": 1, "base": "USD", "rates": {"EUR": 0.9}}),
        ]

        assert _provider().latest()["rates"] == {"EUR": 0.9}

    def test_missing_fields(self, mock_get, mock_sleep):
        mock_get.return_value = _response({"base": "USD", "rates": {}})

        with pytest.raises(InvalidRateError):
            _provider().latest()


@patch("tenacity.nap.time.sleep")
@patch("fxhistory.adapters.providers.openexchange.requests.get")
class TestCurrencies:
    def test_success(self, mock_get, mock_sleep):
        mock_get.return_value = _response({"EUR": "Euro", "USD": "United States Dollar"})

        assert _provider().currencies() == {"EUR": "Euro", "USD": "United States Dollar"}
        assert mock_get.call_args[0][0] == "https://oxr.test/api/currencies.json"

    @pytest.mark.parametrize("payload", [{}, [], "nope"])
    def test_empty_or_invalid_list(self, mock_get, mock_sleep, payload):
        mock_get.return_value = _response(payload)

        with pytest.raises(InvalidRateError):
            _provider().currencies()
