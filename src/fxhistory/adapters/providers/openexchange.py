# src/fxhistory/adapters/providers/openexchange.py
"""
Open Exchange Rates API Provider for Daily Snapshots

This module implements the Open Exchange Rates client that produces the
daily snapshot files consumed by the history generator. It fetches the
latest rates and the currency list, retrying transient failures with an
exponential backoff.

Files that USE this module:
- fxhistory.app (fetch entry point builds the provider)
- tests.test_providers (unit tests)

Files that this module USES:
- fxhistory.adapters.providers.base (RateProvider interface)
- fxhistory.domain.errors (InvalidRateError, ProviderUnavailableError)
- fxhistory.config (settings for app id, URL, timeout and retry policy)
- tenacity (retry with exponential backoff)
"""
import logging
from typing import Any, Dict, Optional

import requests
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fxhistory.adapters.providers.base import RateProvider
from fxhistory.config import settings
from fxhistory.domain.errors import InvalidRateError, ProviderUnavailableError

log = logging.getLogger(__name__)


class OpenExchangeRatesProvider(RateProvider):
    def __init__(
        self,
        app_id: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        retries: Optional[int] = None,
        backoff: Optional[float] = None,
    ):
        """
        Initialize Open Exchange Rates provider.

        Args:
            app_id: API app id (defaults to settings.oxr_app_id)
            base_url: API root URL (defaults to settings.oxr_base_url)
            timeout: HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
            retries: Attempts per request (defaults to settings.fetch_retries)
            backoff: Initial delay between attempts in seconds, doubled after
                     every failure (defaults to settings.fetch_backoff_seconds)

        Raises:
            ValueError: If no app id is configured
        """
        self.app_id = app_id or settings.oxr_app_id
        if not self.app_id:
            raise ValueError("Open Exchange Rates app id not configured (OXR_APP_ID)")
        self.base_url = (base_url or settings.oxr_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.retries = retries or settings.fetch_retries
        self.backoff = settings.fetch_backoff_seconds if backoff is None else backoff

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint}"

    def _get_json(self, endpoint: str) -> Any:
        """
        GET an endpoint and decode its JSON body, retrying on failure.

        Network errors, non-2xx responses and invalid JSON all count as a
        failed attempt. The wait before retry N is ``backoff * 2**(N-1)``.

        Raises:
            ProviderUnavailableError: If every attempt failed
        """
        url = self._url(endpoint)

        def attempt() -> Any:
            resp = requests.get(url, params={"app_id": self.app_id}, timeout=self.timeout)
            if not resp.ok:
                body = resp.text[:200] if resp.text else ""
                raise RuntimeError(f"HTTP error {resp.status_code} {resp.reason}. Body: {body}")
            return resp.json()

        def before_sleep(state) -> None:
            log.warning(
                "Fetch attempt %d failed for %s: %s. Retrying in %.1fs...",
                state.attempt_number, endpoint, state.outcome.exception(), state.next_action.sleep,
            )

        retrying = Retrying(
            stop=stop_after_attempt(self.retries),
            wait=wait_exponential(multiplier=self.backoff),
            retry=retry_if_exception_type((requests.exceptions.RequestException, RuntimeError, ValueError)),
            before_sleep=before_sleep,
        )
        try:
            return retrying(attempt)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            log.error("Failed to fetch %s after %d attempts", endpoint, self.retries)
            raise ProviderUnavailableError(
                f"Open Exchange Rates {endpoint} failed after {self.retries} attempts: {last_error}"
            ) from last_error

    def latest(self) -> Dict[str, Any]:
        """
        Fetch the latest rates.

        Returns:
            ``{"timestamp": int, "base": str, "rates": {code: rate}}``

        Raises:
            ProviderUnavailableError: If the API cannot be reached
            InvalidRateError: If the response lacks timestamp, base or rates
        """
        log.info("Fetching latest exchange rates from Open Exchange Rates")
        data = self._get_json("latest.json")
        if not isinstance(data, dict) or any(key not in data for key in ("timestamp", "base", "rates")):
            log.error("Open Exchange Rates latest response missing required fields")
            raise InvalidRateError("latest rates response is missing timestamp, base or rates")
        return {
            "timestamp": data["timestamp"],
            "base": data["base"],
            "rates": data["rates"],
        }

    def currencies(self) -> Dict[str, str]:
        """
        Fetch the currency list.

        Raises:
            ProviderUnavailableError: If the API cannot be reached
            InvalidRateError: If the response is not a non-empty object
        """
        log.info("Fetching currency list from Open Exchange Rates")
        data = self._get_json("currencies.json")
        if not isinstance(data, dict) or not data:
            log.error("Open Exchange Rates currency list is not a valid non-empty object")
            raise InvalidRateError("currency list response is not a non-empty object")
        return data
