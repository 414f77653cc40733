"""Circuit breaker for storage backend hosts."""

import logging
import threading
import time
from typing import Callable, Dict, Optional

from config.api import APIConfig, CircuitBreakerState


class CircuitBreaker:
    """Fails fast once a host has produced too many consecutive failures.

    CLOSED lets every call through. After ``failure_threshold`` consecutive
    failures the breaker is OPEN and rejects calls until ``recovery_timeout``
    seconds have passed, then one trial request is allowed (HALF_OPEN). A success
    closes it again; a failed trial reopens it.
    """

    def __init__(
        self,
        failure_threshold: int = APIConfig.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
        recovery_timeout: float = APIConfig.CIRCUIT_BREAKER_RECOVERY_TIMEOUT,
        time_func: Callable[[], float] = time.time,
    ):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._time = time_func
        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = CircuitBreakerState.CLOSED
        self.successful_calls = 0
        self.failed_calls = 0
        self._logger = logging.getLogger(__name__)

    def record_success(self):
        """Record a successful operation."""
        old_state = self.state
        self.failure_count = 0
        self.state = CircuitBreakerState.CLOSED
        self.last_failure_time = None
        self.successful_calls += 1
        if old_state != CircuitBreakerState.CLOSED:
            self._logger.info(f"Circuit breaker state changed from {old_state} to {self.state}")

    def record_failure(self):
        """Record a failed operation."""
        self.failure_count += 1
        self.last_failure_time = self._time()
        self.failed_calls += 1

        if self.state == CircuitBreakerState.HALF_OPEN or (
            self.failure_count >= self.failure_threshold and self.state != CircuitBreakerState.OPEN
        ):
            self.state = CircuitBreakerState.OPEN
            self._logger.warning(
                f"Circuit breaker opened after {self.failure_count} failures. State changed to {self.state}"
            )

    def can_attempt(self) -> bool:
        """Check if we can attempt a request."""
        if self.state == CircuitBreakerState.CLOSED:
            return True
        elif self.state == CircuitBreakerState.OPEN:
            if self.last_failure_time is not None and self._time() - self.last_failure_time >= self.recovery_timeout:
                self.state = CircuitBreakerState.HALF_OPEN
                self._logger.info(f"Circuit breaker transitioning to {self.state}")
                return True
            return False
        else:  # HALF_OPEN
            return True

    def is_open(self) -> bool:
        """Check if circuit breaker is open."""
        return self.state == CircuitBreakerState.OPEN


class CircuitBreakerManager:
    """Manages circuit breakers for different endpoints."""

    def __init__(self):
        self._breakers: Dict[str, CircuitBreaker] = {}
        self._lock = threading.Lock()

    def get_breaker(self, endpoint: str) -> CircuitBreaker:
        """Get or create the circuit breaker for an endpoint."""
        with self._lock:
            if endpoint not in self._breakers:
                self._breakers[endpoint] = CircuitBreaker()
            return self._breakers[endpoint]

    def record_success(self, endpoint: str):
        """Record a successful operation for an endpoint."""
        self.get_breaker(endpoint).record_success()

    def record_failure(self, endpoint: str):
        """Record a failed operation for an endpoint."""
        self.get_breaker(endpoint).record_failure()

    def can_attempt(self, endpoint: str) -> bool:
        """Check if we can attempt a request to an endpoint."""
        return self.get_breaker(endpoint).can_attempt()

    def reset(self):
        """Forget every breaker (used between test cases)."""
        with self._lock:
            self._breakers.clear()


# Global circuit breaker manager
circuit_breaker_manager = CircuitBreakerManager()
