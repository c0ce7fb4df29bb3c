# src/fxhistory/shared/validators.py
"""
Input Validation Utilities - Configuration and Data Validation

This module provides validation functions for configuration values and for
values read from snapshot files: currency codes, provider app ids and rate
values.

Files that USE this module:
- fxhistory.config.settings (uses validation functions in Settings field validators)
- fxhistory.application.history_service (is_numeric_rate while aggregating)
- fxhistory.domain.models (is_finite_number for snapshot timestamps)

Files that this module USES:
- None (pure utility functions)
"""
import math
import re
from typing import Any


def validate_currency_code(code: str) -> bool:
    """
    Validate an ISO-4217 style currency code.

    Args:
        code: Currency code to validate (e.g. "USD")

    Returns:
        True if valid, False otherwise
    """
    if not code:
        return False
    return bool(re.match(r'^[A-Z]{3}$', code))


def validate_app_id(app_id: str, min_length: int = 10) -> bool:
    """
    Validate a provider app id.

    Args:
        app_id: App id to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not app_id:
        return False

    return len(app_id) >= min_length and bool(re.match(r'^[A-Za-z0-9_-]+$', app_id))


def is_finite_number(value: Any) -> bool:
    """
    Check whether a decoded JSON value is a finite number.

    Booleans, strings and nulls do not qualify, and neither do floats that
    overflowed while decoding (e.g. ``1e999`` decodes to ``inf``).
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_numeric_rate(value: Any) -> bool:
    """Check whether a decoded JSON value can be used as a rate."""
    return is_finite_number(value)
