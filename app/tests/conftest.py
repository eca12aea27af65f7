import asyncio
from typing import List

import pytest

from infrastructure.persistence import InMemoryCollectionClient
from infrastructure.resilience.retry import BackoffConfig, RetryExecutor


class RecordedSleep:
    """Async sleep double that records requested delays and returns at once."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def recorded_sleep():
    return RecordedSleep()


@pytest.fixture
def memory_client():
    """In-memory collection client that delivers an initial snapshot."""
    return InMemoryCollectionClient()


@pytest.fixture
def quiet_memory_client():
    """In-memory collection client without initial snapshots (loading window)."""
    return InMemoryCollectionClient(deliver_initial_snapshot=False)


@pytest.fixture
def fast_retry(recorded_sleep):
    """Retry executor with the default policy that never really sleeps."""
    return RetryExecutor(BackoffConfig(), sleep=recorded_sleep)


@pytest.fixture
def settle():
    """Let scheduled consumer tasks run until the loop is idle."""

    async def _settle(rounds: int = 10) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)

    return _settle
