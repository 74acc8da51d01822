"""Fixed-delay retry policy for flaky queries.

A callable signals a recoverable failure by raising :class:`TransientError`;
any other exception propagates immediately. The policy sleeps through an
injected clock so tests can run without waiting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from pwrtest.interfaces import ClockInterface, PwrtestError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransientError(Exception):
    """Raised by a callable when another attempt may succeed."""


class RetryExhaustedError(PwrtestError):
    """Raised when a bounded policy runs out of attempts."""


@dataclass(frozen=True)
class RetryPolicy:
    """Retry a callable with a fixed delay between attempts.

    Attributes:
        delay: Seconds to sleep between attempts.
        max_attempts: Attempt cap; 0 retries forever.
    """

    delay: float
    max_attempts: int = 0

    def __post_init__(self) -> None:
        if self.delay < 0:
            raise ValueError(f"delay must be non-negative, got {self.delay}")
        if self.max_attempts < 0:
            raise ValueError(f"max_attempts must be non-negative, got {self.max_attempts}")

    def call(
        self,
        fn: Callable[[], T],
        clock: ClockInterface,
        *,
        name: str = "call",
        on_retry: Optional[Callable[[int, TransientError], None]] = None,
    ) -> T:
        """Run *fn* until it returns a value.

        Args:
            fn: Zero-argument callable; raises TransientError to retry.
            clock: Clock used for the inter-attempt sleep.
            name: Label used in log messages.
            on_retry: Called with (attempt, error) before each sleep.

        Returns:
            The first successful return value.

        Raises:
            RetryExhaustedError: If ``max_attempts`` is set and reached.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return fn()
            except TransientError as e:
                if self.max_attempts and attempt >= self.max_attempts:
                    logger.error("%s failed after %d attempts: %s", name, attempt, e)
                    raise RetryExhaustedError(
                        f"{name} failed after {attempt} attempts: {e}"
                    ) from e

                logger.warning("%s attempt %d failed (%s), retrying in %gs", name, attempt, e, self.delay)
                if on_retry:
                    on_retry(attempt, e)
                self._sleep(clock)

    def _sleep(self, clock: ClockInterface) -> None:
        if self.delay > 0:
            clock.sleep(self.delay)
