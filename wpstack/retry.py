"""
Retry policy for waiting on services.

Example:
    policy = RetryPolicy(attempts=30, interval=2.0)
    if not policy.poll(wp.db_ready):
        raise SystemExit(1)
"""

import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple, Type, TypeVar, Union

from wpstack.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class RetryError(Exception):
    """Raised when all retry attempts fail."""


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed or exponential retry schedule.

    Attributes:
        attempts: Maximum number of calls
        interval: Sleep after the first failed attempt, in seconds
        backoff: Multiplier applied to the interval after each failure
            (1.0 keeps the interval fixed)
        max_interval: Upper bound for a single sleep
        deadline: Optional overall budget in seconds; no attempt starts
            after it has elapsed
    """

    attempts: int = 30
    interval: float = 2.0
    backoff: float = 1.0
    max_interval: float = 60.0
    deadline: Optional[float] = None

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")
        if self.interval < 0 or self.backoff < 1.0:
            raise ValueError("interval must be >= 0 and backoff >= 1.0")

    def delays(self) -> Iterator[float]:
        """Sleep durations between consecutive attempts."""
        delay = self.interval
        for _ in range(self.attempts - 1):
            yield min(delay, self.max_interval)
            delay *= self.backoff

    def poll(
        self,
        predicate: Callable[[], bool],
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> bool:
        """
        Call predicate until it returns True or the policy is exhausted.

        Returns:
            True if the predicate succeeded, False otherwise
        """
        start = clock()
        delays = self.delays()

        for attempt in range(1, self.attempts + 1):
            if predicate():
                logger.debug("ready after %s/%s attempts", attempt, self.attempts)
                return True

            delay = next(delays, None)
            if delay is None:
                break
            if self.deadline is not None and clock() - start + delay > self.deadline:
                logger.debug("deadline of %ss reached after %s attempts", self.deadline, attempt)
                break

            logger.debug("attempt %s/%s not ready, sleeping %.1fs", attempt, self.attempts, delay)
            sleep(delay)

        return False

    def call(
        self,
        func: Callable[[], T],
        exceptions: Union[Type[BaseException], Tuple[Type[BaseException], ...]] = Exception,
        sleep: Callable[[float], None] = time.sleep,
    ) -> T:
        """
        Call func, retrying on the given exceptions.

        Raises:
            RetryError: When every attempt raised
        """
        delays = self.delays()
        for attempt in range(1, self.attempts + 1):
            try:
                return func()
            except exceptions as exc:
                delay = next(delays, None)
                if delay is None:
                    raise RetryError(str(exc)) from exc
                logger.warning("retry %s/%s after error: %s", attempt, self.attempts, exc)
                sleep(delay)
        raise RetryError("exhausted retries without success")
