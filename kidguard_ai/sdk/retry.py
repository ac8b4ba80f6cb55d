"""
Retry backoff policy.

Capped exponential backoff between gateway attempts.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class BackoffPolicy:
    """Delay schedule for retryable failures.

    The wait after failed attempt ``n`` (1-based) is
    ``min(base_ms * 2 ** (n - 1), cap_ms)``.
    """
    base_ms: int = 1000
    cap_ms: int = 8000

    def __post_init__(self):
        """Validate delay bounds."""
        if self.base_ms < 0:
            raise ValueError("base_ms cannot be negative")
        if self.cap_ms < self.base_ms:
            raise ValueError("cap_ms must be >= base_ms")

    def delay_ms(self, attempt: int) -> int:
        """Delay to wait after the given failed attempt."""
        if attempt < 1:
            raise ValueError("attempt must be >= 1")
        return min(self.base_ms * 2 ** (attempt - 1), self.cap_ms)

    def schedule(self, max_attempts: int) -> List[int]:
        """All waits for a call allowed ``max_attempts`` attempts.

        There is no wait after the last attempt.
        """
        return [self.delay_ms(attempt) for attempt in range(1, max_attempts)]
