"""API clients and communication modules."""

from .circuit_breaker import CircuitBreaker
from .error_handling import ErrorCategory, FileServiceError, categorize_error
from .file_client import FileServiceClient
from .models import FileRecord, StorageStats

__all__ = [
    "FileServiceClient",
    "FileRecord",
    "StorageStats",
    "CircuitBreaker",
    "ErrorCategory",
    "FileServiceError",
    "categorize_error",
]
