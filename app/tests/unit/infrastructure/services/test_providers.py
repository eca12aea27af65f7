"""Unit tests for the process-scoped providers."""

import pytest

from infrastructure.persistence import InMemoryCollectionClient
from infrastructure.resilience.retry import BackoffConfig
from infrastructure.services import providers
from modules.friends import SharedFriendsDataSource
from modules.history import SharedHistoryDataSource
from modules.session import SessionObservers
from modules.user_settings import SharedSettingsDataSource

CACHED_PROVIDERS = [
    providers.get_settings,
    providers.get_collection_client,
    providers.get_retry_executor,
    providers.get_function_client,
    providers.get_history_repository,
    providers.get_history_data_source,
    providers.get_friends_data_source,
    providers.get_settings_data_source,
    providers.get_session_observers,
]


@pytest.fixture(autouse=True)
def fresh_providers(monkeypatch):
    monkeypatch.setenv("COLLECTION_BACKEND", "memory")
    monkeypatch.setenv("FUNCTIONS_BASE_URL", "https://functions.example.test")
    for provider in CACHED_PROVIDERS:
        provider.cache_clear()
    yield
    for provider in CACHED_PROVIDERS:
        provider.cache_clear()


class TestProviders:
    def test_settings_singleton(self):
        assert providers.get_settings() is providers.get_settings()

    def test_memory_backend(self):
        assert isinstance(providers.get_collection_client(), InMemoryCollectionClient)

    def test_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("COLLECTION_BACKEND", "sqlite")

        with pytest.raises(ValueError, match="Unknown COLLECTION_BACKEND"):
            providers.get_collection_client()

    def test_retry_executor_uses_retry_settings(self, monkeypatch):
        monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "4")

        executor = providers.get_retry_executor()

        assert executor.config == BackoffConfig(max_attempts=4)

    def test_function_client_uses_base_url(self):
        client = providers.get_function_client()

        assert client.base_url == "https://functions.example.test"

    def test_data_sources_are_process_singletons(self):
        history = providers.get_history_data_source()

        assert isinstance(history, SharedHistoryDataSource)
        assert history is providers.get_history_data_source()
        assert isinstance(providers.get_friends_data_source(), SharedFriendsDataSource)
        assert isinstance(providers.get_settings_data_source(), SharedSettingsDataSource)

    def test_session_observers_share_data_sources(self):
        session = providers.get_session_observers()

        assert isinstance(session, SessionObservers)
        assert session.history_source is providers.get_history_data_source()
        assert session.friends_source is providers.get_friends_data_source()
        assert session.settings_source is providers.get_settings_data_source()
