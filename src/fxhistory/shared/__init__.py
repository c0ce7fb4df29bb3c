# src/fxhistory/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from fxhistory.shared.validators import (
    is_finite_number,
    is_numeric_rate,
    validate_app_id,
    validate_currency_code,
)
from fxhistory.shared.logging_conf import setup_logging

__all__ = [
    "is_finite_number",
    "is_numeric_rate",
    "validate_app_id",
    "validate_currency_code",
    "setup_logging",
]
