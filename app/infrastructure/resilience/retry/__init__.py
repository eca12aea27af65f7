"""Retry executor for remote calls.

Architecture:
- BackoffConfig: attempt budget and delay curve
- RetryExecutor: runs a coroutine function under a BackoffConfig
- with_retry: one-shot helper building an executor from keyword arguments
- next_delay / backoff_schedule: the delay curve as pure functions

Usage:
    from infrastructure.operations import is_retryable_error
    from infrastructure.resilience.retry import RetryExecutor, BackoffConfig

    executor = RetryExecutor(BackoffConfig(), should_retry=is_retryable_error)
    snapshot = await executor.run(lambda: client.get_once(query), "history_page")
"""

from infrastructure.resilience.retry.config import BackoffConfig
from infrastructure.resilience.retry.executor import (
    RetryExecutor,
    backoff_schedule,
    next_delay,
    with_retry,
)

__all__ = [
    "BackoffConfig",
    "RetryExecutor",
    "backoff_schedule",
    "next_delay",
    "with_retry",
]
