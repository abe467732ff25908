"""
Backoff schedule for polling the backend after application creation.
"""

import random


class ExponentialBackoff:
    """Implements exponential backoff with jitter for poll intervals."""

    def __init__(self, base_delay: float = 1.0, max_delay: float = 30.0, max_wait: float = 120.0):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.max_wait = max_wait

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay with exponential backoff and jitter."""
        delay = min(self.base_delay * (2**attempt), self.max_delay)
        # Add jitter (±25%)
        jitter = delay * 0.25 * (random.random() * 2 - 1)
        return max(0, delay + jitter)

    def should_continue(self, waited: float) -> bool:
        """Check if polling may continue given the time already spent waiting."""
        return waited < self.max_wait
