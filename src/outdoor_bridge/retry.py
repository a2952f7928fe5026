"""Bounded retry with exponential backoff for async operations."""

import asyncio
import math
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterator, TypeVar

from .config import RetryConfig
from .errors import BridgeError, ConfigurationError, RateLimitedError

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]
RetryHook = Callable[[int, BridgeError, float], None]


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try an operation and how long to wait in between.

    Delays are in seconds. The wait before attempt ``n + 1`` is
    ``base_delay * backoff_multiplier ** (n - 1)``, capped at ``max_delay``.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        for name in ("base_delay", "max_delay", "backoff_multiplier"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be a finite number")
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ConfigurationError("base_delay must not be negative")
        if self.max_delay < self.base_delay:
            raise ConfigurationError("max_delay must not be shorter than base_delay")
        if self.backoff_multiplier <= 1:
            raise ConfigurationError("backoff_multiplier must be greater than 1")

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            base_delay=config.base_delay_seconds,
            max_delay=config.max_delay_seconds,
            backoff_multiplier=config.backoff_multiplier,
        )

    def delays(self) -> Iterator[float]:
        """Yield the wait before each retry (max_attempts - 1 values)."""
        delay = min(self.base_delay, self.max_delay)
        for _ in range(self.max_attempts - 1):
            yield delay
            delay = min(delay * self.backoff_multiplier, self.max_delay)


class RetryingExecutor:
    """Runs a fallible async operation under a RetryPolicy.

    Only BridgeError is handled: transient errors are retried, permanent ones
    are re-raised at once. Any other exception propagates unchanged. The
    executor never logs; pass ``on_retry`` to observe retries.
    """

    def __init__(
        self,
        policy: RetryPolicy,
        sleep: SleepFunc | None = None,
        on_retry: RetryHook | None = None,
    ) -> None:
        self.policy = policy
        self._sleep = sleep or asyncio.sleep
        self._on_retry = on_retry

    async def run(self, op: Callable[[], Awaitable[T]]) -> T:
        """Execute ``op`` until it succeeds, fails permanently, or runs out of attempts.

        Args:
            op: Zero-argument coroutine function to call on each attempt.

        Returns:
            The value of the first successful attempt.

        Raises:
            BridgeError: The permanent error, or the last transient error once
                all attempts are used.
        """
        delays = self.policy.delays()
        attempt = 0
        while True:
            attempt += 1
            try:
                return await op()
            except BridgeError as e:
                if not e.transient:
                    raise
                delay = next(delays, None)
                if delay is None:
                    raise
                if isinstance(e, RateLimitedError) and e.retry_after is not None:
                    delay = min(e.retry_after, self.policy.max_delay)
                if self._on_retry is not None:
                    self._on_retry(attempt, e, delay)
                await self._sleep(delay)
