# src/fxhistory/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Providers

This module defines the abstract base class for upstream rate providers that
feed the daily snapshot store.

Files that USE this module:
- fxhistory.adapters.providers.openexchange (OpenExchangeRatesProvider implements RateProvider)
- fxhistory.application.snapshot_service (depends on RateProvider only)

Files that this module USES:
- None (pure interface definition)
"""
from abc import ABC, abstractmethod
from typing import Any, Dict


class RateProvider(ABC):
    @abstractmethod
    def latest(self) -> Dict[str, Any]:
        """Return the latest snapshot as ``{"timestamp", "base", "rates"}``."""
        raise NotImplementedError

    @abstractmethod
    def currencies(self) -> Dict[str, str]:
        """Return the currency list as code -> display name."""
        raise NotImplementedError
