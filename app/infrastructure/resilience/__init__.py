"""Resilience patterns and implementations.

Retry with capped exponential backoff for remote calls.
"""

from infrastructure.resilience.retry import (
    BackoffConfig,
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
