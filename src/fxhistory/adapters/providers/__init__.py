# src/fxhistory/adapters/providers/__init__.py
"""
Rate Providers - Upstream Exchange Rate APIs

This package contains the clients that fetch daily snapshots:
- Open Exchange Rates (latest rates and currency list)
"""

from fxhistory.adapters.providers.base import RateProvider
from fxhistory.adapters.providers.openexchange import OpenExchangeRatesProvider

__all__ = [
    "RateProvider",
    "OpenExchangeRatesProvider",
]
