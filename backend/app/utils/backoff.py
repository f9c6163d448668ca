from __future__ import annotations

from dataclasses import dataclass


def calc_next_delay(attempts: int, base_seconds: float = 10, max_seconds: float = 120) -> float:
    """
    Exponential backoff: first failure -> base, doubling after that, capped at max_seconds.
    attempts: number of attempts already made
    """
    attempts = max(1, attempts)
    delay = base_seconds * (2 ** (attempts - 1))
    return min(max_seconds, delay)


@dataclass(frozen=True)
class RetryPolicy:
    """How often one batch may call the generation service. max_attempts=1 means no retry."""

    max_attempts: int = 1
    base_seconds: float = 10
    max_seconds: float = 120

    def should_retry(self, attempts: int) -> bool:
        return attempts < max(1, self.max_attempts)

    def delay_for(self, attempts: int) -> float:
        return calc_next_delay(attempts, self.base_seconds, self.max_seconds)

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        from app.core.config import settings

        return cls(
            max_attempts=settings.GENERATION_MAX_ATTEMPTS,
            base_seconds=settings.GENERATION_RETRY_BASE_SEC,
            max_seconds=settings.GENERATION_RETRY_MAX_SEC,
        )
