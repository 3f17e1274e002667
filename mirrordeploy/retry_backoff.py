"""Retry backoff calculator for git command retries."""

import random


class RetryBackoffCalculator:
    """Calculate delays between attempts of a failing git command."""

    def __init__(
        self,
        strategy: str = "fixed",
        base_seconds: float = 0,
        max_seconds: float = 30,
    ) -> None:
        self.strategy = strategy
        self.base_seconds = base_seconds
        self.max_seconds = max_seconds

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the given failed attempt."""
        return self.calculate_delay(attempt, self.strategy, self.base_seconds, self.max_seconds)

    @staticmethod
    def calculate_delay(
        attempt: int,
        strategy: str,
        base_seconds: float,
        max_seconds: float,
    ) -> float:
        """Calculate backoff delay with jitter.

        Args:
            attempt: Failed attempt number (1-based)
            strategy: Backoff strategy (exponential, linear, fixed)
            base_seconds: Base delay in seconds
            max_seconds: Maximum delay cap in seconds

        Returns:
            Delay in seconds with ±10% jitter applied
        """
        if strategy == "exponential":
            delay = base_seconds * (2**attempt)
        elif strategy == "linear":
            delay = base_seconds * attempt
        elif strategy == "fixed":
            delay = base_seconds
        else:
            raise ValueError(f"Unknown backoff strategy: {strategy}")

        delay = min(delay, max_seconds)

        jitter = delay * 0.1
        delay = delay + random.uniform(-jitter, jitter)

        return float(max(0.0, delay))
