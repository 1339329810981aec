"""Timing settings for watchers."""

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry schedule for waiting on a page element.

    Attributes:
        delay: Seconds before the second attempt
        max_attempts: Total attempts, including the first
        backoff_multiplier: Factor applied to the delay after each attempt
        max_delay: Upper bound for a single delay (None = unbounded)
    """

    delay: float = 0.5
    max_attempts: int = 20
    backoff_multiplier: float = 1.0
    max_delay: Optional[float] = None

    def delays(self) -> Iterator[float]:
        """Delays between consecutive attempts (max_attempts - 1 values)."""
        current = self.delay
        for _ in range(max(self.max_attempts - 1, 0)):
            if self.max_delay is not None:
                current = min(current, self.max_delay)
            yield current
            current *= self.backoff_multiplier


@dataclass(frozen=True)
class WatcherConfig:
    """
    Watcher timing for one filter session.

    Attributes:
        container_retry_delay: Initial delay between container lookups (seconds)
        container_max_attempts: Container lookups before falling back to <body>
        container_backoff_multiplier: Growth factor of the lookup delay
        settle_delay: Wait after a save click before re-reading the card (seconds)
        debounce: Trailing-edge debounce for mutation passes (0 disables)
    """

    container_retry_delay: float = 0.5
    container_max_attempts: int = 20
    container_backoff_multiplier: float = 1.0
    settle_delay: float = 0.6
    debounce: float = 0.0

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            delay=self.container_retry_delay,
            max_attempts=self.container_max_attempts,
            backoff_multiplier=self.container_backoff_multiplier,
        )
