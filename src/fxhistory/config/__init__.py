# src/fxhistory/config/__init__.py
"""
Configuration Module

Provides centralized configuration management using Pydantic Settings,
read from environment variables and an optional .env file.
"""

from fxhistory.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
