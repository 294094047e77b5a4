"""
Concurrency Control Service

Retry timing and bookkeeping for optimistic-concurrency conflicts. Writers
that lose a race (a stale project version or a task number that is already
taken) reload and re-run; this service decides how long to wait between
attempts and counts how often that happens.
"""

import random
import threading


class ConcurrencyService:
    """
    Exponential backoff with optional jitter plus conflict metrics.

    The service is shared across threads, so counters are guarded by a lock.
    """

    def __init__(
        self,
        max_retries: int = 5,
        base_delay: float = 0.01,
        max_delay: float = 0.5,
        backoff_factor: float = 2.0,
        jitter: bool = True,
    ) -> None:
        """
        Initialize the concurrency service.

        Args:
            max_retries: Maximum number of retry attempts for version conflicts
            base_delay: Initial delay between retries in seconds
            max_delay: Maximum delay between retries in seconds
            backoff_factor: Multiplication factor for exponential backoff
            jitter: Whether to add random jitter to retry delays
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter

        self._lock = threading.Lock()
        self._version_conflicts = 0
        self._successful_retries = 0
        self._failed_retries = 0

    def calculate_backoff_delay(self, attempt: int) -> float:
        """
        Calculate delay for retry attempt using exponential backoff.

        Args:
            attempt: Current retry attempt number (0-based)

        Returns:
            Delay in seconds, never negative
        """
        delay = min(self.base_delay * (self.backoff_factor**attempt), self.max_delay)

        if self.jitter:
            # ±25% of delay
            jitter_amount = delay * 0.25
            delay += random.uniform(-jitter_amount, jitter_amount)

        return max(0.0, delay)

    def record_conflict(self) -> None:
        with self._lock:
            self._version_conflicts += 1

    def record_retry_outcome(self, succeeded: bool) -> None:
        """Count the end of an operation that needed at least one retry."""
        with self._lock:
            if succeeded:
                self._successful_retries += 1
            else:
                self._failed_retries += 1

    def get_metrics(self) -> dict[str, int]:
        with self._lock:
            return {
                "version_conflicts": self._version_conflicts,
                "successful_retries": self._successful_retries,
                "failed_retries": self._failed_retries,
            }

    def reset_metrics(self) -> None:
        with self._lock:
            self._version_conflicts = 0
            self._successful_retries = 0
            self._failed_retries = 0
