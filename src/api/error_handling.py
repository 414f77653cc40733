"""Error handling and categorization for storage API operations."""

import asyncio
import json
from enum import Enum
from typing import Optional

import aiohttp


class ErrorCategory(Enum):
    """Categories for different types of API errors."""
    NETWORK = "network"
    SERVER = "server"
    CLIENT = "client"
    TIMEOUT = "timeout"
    DATA = "data"
    UNKNOWN = "unknown"


def categorize_error(exception: Exception) -> ErrorCategory:
    """Categorize an exception into error types for better handling."""
    if isinstance(exception, FileServiceError):
        return exception.category
    if isinstance(exception, asyncio.TimeoutError):
        return ErrorCategory.TIMEOUT
    elif isinstance(exception, aiohttp.ClientConnectorError):
        return ErrorCategory.NETWORK
    elif isinstance(exception, aiohttp.ClientResponseError):
        if 400 <= exception.status < 500:
            return ErrorCategory.CLIENT
        elif 500 <= exception.status < 600:
            return ErrorCategory.SERVER
        else:
            return ErrorCategory.UNKNOWN
    elif isinstance(exception, aiohttp.ClientError):
        return ErrorCategory.NETWORK
    elif isinstance(exception, (json.JSONDecodeError, ValueError, KeyError, TypeError)):
        return ErrorCategory.DATA
    else:
        return ErrorCategory.UNKNOWN


class FileServiceError(Exception):
    """A failed call to the storage backend."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN, status: Optional[int] = None):
        self.message = message
        self.category = category
        self.status = status
        super().__init__(self.message)

    @classmethod
    def from_exception(cls, operation: str, exception: Exception) -> "FileServiceError":
        """Wrap a transport or decoding exception raised during ``operation``."""
        if isinstance(exception, FileServiceError):
            return exception
        status = exception.status if isinstance(exception, aiohttp.ClientResponseError) else None
        detail = str(exception) or type(exception).__name__
        return cls(f"{operation} failed: {detail}", categorize_error(exception), status)


class CircuitBreakerOpenException(FileServiceError):
    """Exception raised when an operation is attempted while the circuit breaker is open."""
    def __init__(self, message="Circuit breaker is open and cannot accept new calls"):
        super().__init__(message, ErrorCategory.NETWORK)
