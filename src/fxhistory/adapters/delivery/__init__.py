# src/fxhistory/adapters/delivery/__init__.py
"""
Delivery Adapters - Publishing Conventions

Cache lifetimes the edge layer applies to the published files.
"""

from fxhistory.adapters.delivery.cache_policy import (
    cache_control_header,
    cache_ttl_seconds,
    seconds_until_next_refresh,
)

__all__ = [
    "cache_control_header",
    "cache_ttl_seconds",
    "seconds_until_next_refresh",
]
