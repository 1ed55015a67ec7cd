"""
Resilience utilities for handling flaky RPC nodes.

Chain reads are retried on network-looking errors; anything else propagates
immediately. ConnectionMonitor keeps health statistics for long-running loops.
"""
from __future__ import annotations

import random
import time
from typing import Callable, Optional, TypeVar

T = TypeVar('T')


class RetryConfig:
    """Configuration for retry logic."""

    def __init__(
        self,
        max_retries: int = 3,
        initial_delay: float = 0.5,
        max_delay: float = 10.0,
        exponential_base: float = 2.0,
        jitter: bool = True
    ):
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1: {max_retries}")
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for given attempt with exponential backoff."""
        delay = min(
            self.initial_delay * (self.exponential_base ** attempt),
            self.max_delay
        )
        if self.jitter:
            delay *= (0.5 + random.random())
        return delay


NETWORK_KEYWORDS = (
    'connection',
    'timeout',
    'timed out',
    'network',
    'unreachable',
    'refused',
    'reset',
    'broken pipe',
    'failed to connect',
    'unavailable',
    'bad gateway',
    'too many requests',
)


def is_network_error(error: BaseException) -> bool:
    """Check if error is network-related."""
    if isinstance(error, (ConnectionError, TimeoutError)):
        return True
    error_str = f"{type(error).__name__} {error}".lower()
    return any(keyword in error_str for keyword in NETWORK_KEYWORDS)


def resilient_call(
    func: Callable[..., T],
    *args,
    retry_config: Optional[RetryConfig] = None,
    on_retry: Optional[Callable[[int, Exception], None]] = None,
    **kwargs
) -> T:
    """
    Execute function, retrying network failures with backoff.

    The last network error is re-raised once retries are exhausted.
    Non-network errors are raised on the first occurrence.
    """
    config = retry_config or RetryConfig()

    for attempt in range(config.max_retries):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not is_network_error(e) or attempt == config.max_retries - 1:
                raise
            if on_retry:
                on_retry(attempt, e)
            time.sleep(config.get_delay(attempt))
    raise AssertionError("unreachable")  # pragma: no cover


class ConnectionMonitor:
    """Monitors connection health and provides statistics."""

    def __init__(self, name: str = "connection", warn_after: int = 3):
        self.name = name
        self.warn_after = warn_after
        self.total_attempts = 0
        self.successful_attempts = 0
        self.failed_attempts = 0
        self.consecutive_failures = 0
        self.last_success_time = 0.0
        self.last_failure_time = 0.0
        self.is_connected = True

    def record_success(self):
        """Record successful operation."""
        self.total_attempts += 1
        self.successful_attempts += 1
        self.consecutive_failures = 0
        self.last_success_time = time.time()

        if not self.is_connected:
            print(f"[{self.name}] ✓ Connection restored")
            self.is_connected = True

    def record_failure(self, error: BaseException):
        """Record failed operation."""
        self.total_attempts += 1
        self.failed_attempts += 1
        self.consecutive_failures += 1
        self.last_failure_time = time.time()

        if self.is_connected and self.consecutive_failures >= self.warn_after:
            print(f"[{self.name}] ⚠ Connection issues detected ({self.consecutive_failures} consecutive failures): {error}")
            self.is_connected = False

    def get_stats(self) -> dict:
        """Get connection statistics."""
        success_rate = 0.0
        if self.total_attempts > 0:
            success_rate = (self.successful_attempts / self.total_attempts) * 100

        return {
            "name": self.name,
            "is_connected": self.is_connected,
            "total_attempts": self.total_attempts,
            "successful": self.successful_attempts,
            "failed": self.failed_attempts,
            "consecutive_failures": self.consecutive_failures,
            "success_rate": success_rate,
            "last_success_time": self.last_success_time,
            "last_failure_time": self.last_failure_time,
        }
