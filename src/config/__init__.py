"""Configuration management for the FileHub dashboard."""

from .api import APIConfig, CircuitBreakerState
from .settings import Settings

__all__ = ["Settings", "APIConfig", "CircuitBreakerState"]
