"""Retry executor for fallible async operations.

Re-invokes a zero-argument coroutine function until it succeeds, the
attempt budget is spent, or the caller's predicate marks the failure as
not worth retrying. Between attempts the calling task sleeps; the delay
compounds as ``min(max_delay, delay * factor ** attempt)`` where
``attempt`` is the 1-based number of the attempt that just failed.
"""

import asyncio
from typing import Awaitable, Callable, Iterator, List, Optional, TypeVar

import structlog

from infrastructure.resilience.retry.config import BackoffConfig

logger = structlog.get_logger()

T = TypeVar("T")

RetryPredicate = Callable[[BaseException], bool]
SleepFunction = Callable[[float], Awaitable[None]]


def _always_retry(exc: BaseException) -> bool:
    return True


def next_delay(current: float, attempt: int, config: BackoffConfig) -> float:
    """Delay to use after ``attempt`` failed and ``current`` was waited.

    Args:
        current: The delay that was just waited
        attempt: 1-based number of the failed attempt
        config: Backoff policy

    Returns:
        The next delay, never above config.max_delay
    """
    return min(config.max_delay, current * config.factor**attempt)


def backoff_schedule(config: BackoffConfig) -> List[float]:
    """Delays waited before each retry when every attempt fails.

    The list has ``max_attempts - 1`` entries.
    """
    return list(_iter_delays(config))


def _iter_delays(config: BackoffConfig) -> Iterator[float]:
    delay = config.initial_delay
    for attempt in range(1, config.max_attempts):
        yield delay
        delay = next_delay(delay, attempt, config)


class RetryExecutor:
    """Runs async operations under a backoff policy.

    Attributes:
        config: BackoffConfig controlling attempts and delays
        should_retry: Predicate classifying a failure as transient
    """

    def __init__(
        self,
        config: Optional[BackoffConfig] = None,
        should_retry: Optional[RetryPredicate] = None,
        sleep: Optional[SleepFunction] = None,
    ) -> None:
        self.config = config or BackoffConfig()
        self.should_retry = should_retry or _always_retry
        self._sleep = sleep or asyncio.sleep
        self.log = logger.bind(component="retry_executor")

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str = "operation",
        should_retry: Optional[RetryPredicate] = None,
    ) -> T:
        """Execute ``operation``, retrying transient failures.

        Args:
            operation: Zero-argument coroutine function to call
            operation_name: Name used in log entries
            should_retry: Optional predicate overriding the executor default

        Returns:
            The first successful result

        Raises:
            Exception: The last failure once attempts are exhausted, or the
                first failure the predicate rejects
        """
        predicate = should_retry or self.should_retry
        attempt = 0
        delay = self.config.initial_delay

        while True:
            try:
                result = await operation()
            except Exception as exc:
                attempt += 1

                if attempt >= self.config.max_attempts:
                    self.log.error(
                        "retry_exhausted",
                        operation=operation_name,
                        attempts=attempt,
                        error=str(exc),
                    )
                    raise

                if not predicate(exc):
                    self.log.error(
                        "retry_aborted_non_retryable",
                        operation=operation_name,
                        attempts=attempt,
                        error=str(exc),
                    )
                    raise

                self.log.warning(
                    "retry_attempt_failed",
                    operation=operation_name,
                    attempt=attempt,
                    max_attempts=self.config.max_attempts,
                    delay=delay,
                    error=str(exc),
                )
                await self._sleep(delay)
                delay = next_delay(delay, attempt, self.config)
                continue

            if attempt > 0:
                self.log.info(
                    "retry_succeeded",
                    operation=operation_name,
                    attempt=attempt + 1,
                )
            return result


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    initial_delay: float = 0.5,
    max_delay: float = 5.0,
    factor: float = 2.0,
    should_retry: Optional[RetryPredicate] = None,
    sleep: Optional[SleepFunction] = None,
    operation_name: str = "operation",
) -> T:
    """Run ``operation`` with exponential backoff.

    Example:
        from infrastructure.operations import is_retryable_error

        counts = await with_retry(
            lambda: client.get_once(query),
            should_retry=is_retryable_error,
        )
    """
    config = BackoffConfig(
        max_attempts=max_attempts,
        initial_delay=initial_delay,
        max_delay=max_delay,
        factor=factor,
    )
    executor = RetryExecutor(config, should_retry=should_retry, sleep=sleep)
    return await executor.run(operation, operation_name=operation_name)
