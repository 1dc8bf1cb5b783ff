from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CacheEntry:
    """Locally produced content, keyed by its content-address."""

    address: str
    content: str
    content_type: str
    size: int
    stored_at: datetime
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class RetryPolicy:
    """Mirror retry schedule for one address."""

    max_rounds: int = 5
    base_delay_seconds: float = 5.0
    backoff_factor: float = 1.5
    max_delay_seconds: float = 60.0
    propagation_grace_seconds: float = 30.0

    def delays(self) -> Iterator[float]:
        """Yield the sleep before each round after the first (max_rounds - 1 values).

        Never decreasing, never above max_delay_seconds.
        """
        delay = min(self.base_delay_seconds, self.max_delay_seconds)
        for _ in range(self.max_rounds - 1):
            yield delay
            delay = min(delay * max(self.backoff_factor, 1.0), self.max_delay_seconds)

    def as_dict(self) -> dict[str, float | int]:
        return {
            "max_rounds": self.max_rounds,
            "base_delay_seconds": self.base_delay_seconds,
            "backoff_factor": self.backoff_factor,
            "max_delay_seconds": self.max_delay_seconds,
            "propagation_grace_seconds": self.propagation_grace_seconds,
        }
