"""Shared fixtures for retry executor tests."""

from typing import Any, Optional

import pytest

from infrastructure.resilience.retry import BackoffConfig


@pytest.fixture
def backoff_config_factory():
    """Factory for creating BackoffConfig instances."""

    def _factory(
        max_attempts: int = 3,
        initial_delay: float = 0.5,
        max_delay: float = 5.0,
        factor: float = 2.0,
    ) -> BackoffConfig:
        return BackoffConfig(
            max_attempts=max_attempts,
            initial_delay=initial_delay,
            max_delay=max_delay,
            factor=factor,
        )

    return _factory


class FlakyOperation:
    """Zero-argument coroutine function failing a fixed number of times."""

    def __init__(
        self,
        failures: int,
        error: Optional[BaseException] = None,
        result: Any = "ok",
    ) -> None:
        self.failures = failures
        self.error = error or ConnectionError("network timeout")
        self.result = result
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.result


@pytest.fixture
def flaky_operation_factory():
    """Factory for operations that fail ``failures`` times, then succeed."""

    def _factory(failures: int, error: Optional[BaseException] = None, result: Any = "ok"):
        return FlakyOperation(failures, error=error, result=result)

    return _factory
