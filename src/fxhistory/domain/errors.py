# src/fxhistory/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions raised by the snapshot store,
the history pipeline and the upstream provider.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class SnapshotStoreError(DomainError):
    """Raised when the snapshot directory exists but cannot be listed."""
    pass


class SnapshotParseError(DomainError):
    """Raised when a single daily snapshot file cannot be read or parsed."""
    pass


class ArtifactWriteError(DomainError):
    """Raised when a history artifact cannot be written to disk."""
    pass


class InvalidRateError(DomainError):
    """Raised when a provider payload is missing required rate fields."""
    pass


class ProviderUnavailableError(DomainError):
    """Raised when a provider is unavailable."""
    pass
