"""API configuration for the FileHub storage backend."""

import os
from enum import Enum


class CircuitBreakerState(Enum):
    """States for the circuit breaker pattern."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class APIConfig:
    """API configuration and settings."""

    # REST endpoint
    BASE_URL = os.getenv("FILEHUB_API_URL", "http://localhost:8000/api").rstrip("/")

    # Endpoint paths
    FILES_PATH = "/files/"
    STATS_PATH = "/files/stats/"

    # Request settings
    REQUEST_TIMEOUT = 30
    UPLOAD_TIMEOUT = 300
    UPLOAD_FIELD_NAME = "file"

    # Retry settings (idempotent GET requests only)
    MAX_RETRIES = 3
    RETRY_BASE_DELAY = 2
    RETRY_MAX_DELAY = 30

    # Circuit breaker settings
    CIRCUIT_BREAKER_FAILURE_THRESHOLD = 5
    CIRCUIT_BREAKER_RECOVERY_TIMEOUT = 60

    @classmethod
    def get_files_url(cls, base_url: str = None) -> str:
        """Get the catalog collection URL."""
        return f"{(base_url or cls.BASE_URL).rstrip('/')}{cls.FILES_PATH}"

    @classmethod
    def get_file_url(cls, file_id: str, base_url: str = None) -> str:
        """Get the URL of a single catalog entry."""
        return f"{(base_url or cls.BASE_URL).rstrip('/')}{cls.FILES_PATH}{file_id}/"

    @classmethod
    def get_stats_url(cls, base_url: str = None) -> str:
        """Get the storage statistics URL."""
        return f"{(base_url or cls.BASE_URL).rstrip('/')}{cls.STATS_PATH}"
