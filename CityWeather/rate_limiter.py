"""Global minimum spacing between outgoing weather requests."""
import logging
from typing import Optional


DEFAULT_REQUEST_DELAY = 1.0  # seconds


class RateLimiter:
    """Tracks when the last fetch was launched, across all cities."""

    def __init__(self, min_interval: float = DEFAULT_REQUEST_DELAY):
        self.min_interval = min_interval
        self.last_attempt: Optional[float] = None

    def ready(self, now: float) -> bool:
        """Return True if enough time has passed since the last launched fetch."""
        if self.last_attempt is None:
            return True
        elapsed = now - self.last_attempt
        if elapsed < self.min_interval:
            logging.debug(f"Rate limit active: {elapsed:.3f}s since last request (min {self.min_interval}s)")
            return False
        return True

    def record(self, now: float) -> None:
        """Mark a fetch as launched at now."""
        self.last_attempt = now
