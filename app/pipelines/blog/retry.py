"""Bounded exponential-backoff retry policy for flaky collaborators."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from app.config.settings import settings

logger = logging.getLogger("app.services.content_pipeline")

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]
RetryCallback = Callable[[int, float, BaseException], None]


class RetryExhaustedError(RuntimeError):
    """Raised when every attempt failed with a transient error."""

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{last_error} (failed after {attempts} attempts)")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt counter plus backoff schedule.

    ``attempt`` is 1-based everywhere: the delay after attempt ``n`` is
    ``base_delay * 2 ** (n - 1)``, so the defaults wait 2s and then 4s.
    """

    max_attempts: int = 3
    base_delay: float = 2.0
    transient_markers: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")
        object.__setattr__(
            self,
            "transient_markers",
            tuple(marker.lower() for marker in self.transient_markers if marker),
        )

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        pipeline = settings.pipeline
        return cls(
            max_attempts=pipeline.tts_max_attempts,
            base_delay=pipeline.tts_base_delay_seconds,
            transient_markers=pipeline.transient_error_markers,
        )

    def is_transient(self, error: BaseException) -> bool:
        message = str(error).lower()
        return any(marker in message for marker in self.transient_markers)

    def backoff(self, attempt: int) -> float:
        return self.base_delay * (2 ** (attempt - 1))

    def next_delay(self, attempt: int, error: BaseException) -> Optional[float]:
        """Delay before the next attempt, or ``None`` when no retry is allowed."""

        if attempt >= self.max_attempts or not self.is_transient(error):
            return None
        return self.backoff(attempt)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        sleep: SleepFn = asyncio.sleep,
        on_retry: Optional[RetryCallback] = None,
    ) -> T:
        """Await ``operation`` until it succeeds or the policy gives up.

        Non-transient errors propagate unchanged on the attempt they happen.
        """

        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as exc:
                delay = self.next_delay(attempt, exc)
                if delay is None:
                    if self.is_transient(exc):
                        raise RetryExhaustedError(attempt, exc) from exc
                    raise
                logger.warning(
                    "Transient error on attempt %s/%s, retrying in %.1fs: %s",
                    attempt,
                    self.max_attempts,
                    delay,
                    exc,
                )
                if on_retry is not None:
                    on_retry(attempt, delay, exc)
                await sleep(delay)
                attempt += 1


__all__ = ["RetryExhaustedError", "RetryPolicy"]
