"""Fixtures for translation history tests."""

import pytest

from modules.history import HistoryRepository, SharedHistoryDataSource


@pytest.fixture
def repository(memory_client, fast_retry):
    return HistoryRepository(memory_client, retry=fast_retry)


@pytest.fixture
def history(memory_client, repository):
    return SharedHistoryDataSource(memory_client, repository)


@pytest.fixture
def quiet_history(quiet_memory_client, fast_retry):
    repository = HistoryRepository(quiet_memory_client, retry=fast_retry)
    return SharedHistoryDataSource(quiet_memory_client, repository)
