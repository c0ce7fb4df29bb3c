# src/fxhistory/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (upstream rate API)
- Persistence (snapshot store and history files)
- Delivery (edge cache policy for published files)
"""

__all__ = []
