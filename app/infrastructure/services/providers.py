"""
Factory functions for dependency injection.

Provides process-scoped singleton providers for the collection client, the
retry executor and the shared data sources. Each shared data source must
exist once per process; these providers are the only place that constructs
them outside of tests.
"""

from functools import lru_cache

from infrastructure.clients.functions import CallableFunctionClient
from infrastructure.configuration import Settings
from infrastructure.operations import is_retryable_error
from infrastructure.persistence import InMemoryCollectionClient, RemoteCollectionClient
from infrastructure.resilience.retry import BackoffConfig, RetryExecutor
from modules.friends import SharedFriendsDataSource
from modules.history import HistoryRepository, SharedHistoryDataSource
from modules.session import SessionObservers
from modules.user_settings import SharedSettingsDataSource


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_collection_client() -> RemoteCollectionClient:
    """
    Get the remote collection client selected by ``COLLECTION_BACKEND``.

    The Firestore adapter is imported on demand so the google-cloud SDK is
    only loaded when it is used.

    Returns:
        RemoteCollectionClient: Firestore adapter or the in-memory store.
    """
    settings = get_settings()
    backend = settings.firestore.BACKEND.lower()
    if backend == "memory":
        return InMemoryCollectionClient()
    if backend == "firestore":
        from infrastructure.persistence.firestore import FirestoreCollectionClient

        return FirestoreCollectionClient(settings.firestore)
    raise ValueError(f"Unknown COLLECTION_BACKEND: {settings.firestore.BACKEND}")


@lru_cache
def get_retry_executor() -> RetryExecutor:
    """Retry executor configured from ``RETRY_*`` settings."""
    settings = get_settings()
    return RetryExecutor(
        BackoffConfig.from_settings(settings.retry),
        should_retry=is_retryable_error,
    )


@lru_cache
def get_function_client() -> CallableFunctionClient:
    """Callable function client for ``FUNCTIONS_BASE_URL``."""
    settings = get_settings()
    return CallableFunctionClient(
        base_url=settings.functions.BASE_URL,
        timeout=settings.functions.TIMEOUT_SECONDS,
        retry_executor=get_retry_executor(),
    )


@lru_cache
def get_history_repository() -> HistoryRepository:
    settings = get_settings()
    return HistoryRepository(
        get_collection_client(),
        retry=get_retry_executor(),
        batch_chunk_size=settings.history.BATCH_CHUNK_SIZE,
        count_scan_limit=settings.history.COUNT_SCAN_LIMIT,
        max_batch_size=settings.firestore.BATCH_SIZE,
    )


@lru_cache
def get_history_data_source() -> SharedHistoryDataSource:
    """Process-wide shared history data source."""
    settings = get_settings()
    return SharedHistoryDataSource(
        get_collection_client(),
        get_history_repository(),
        view_limit=settings.history.VIEW_LIMIT,
        max_limit=settings.history.MAX_LIMIT,
    )


@lru_cache
def get_friends_data_source() -> SharedFriendsDataSource:
    """Process-wide shared friends data source."""
    settings = get_settings()
    return SharedFriendsDataSource(
        get_collection_client(),
        friends_limit=settings.friends.LIST_LIMIT,
        requests_limit=settings.friends.REQUESTS_LIMIT,
    )


@lru_cache
def get_settings_data_source() -> SharedSettingsDataSource:
    """Process-wide shared user settings data source."""
    return SharedSettingsDataSource(get_collection_client(), retry=get_retry_executor())


@lru_cache
def get_session_observers() -> SessionObservers:
    """Session owner wired to the process-wide data sources."""
    return SessionObservers(
        settings_source=get_settings_data_source(),
        history_source=get_history_data_source(),
        friends_source=get_friends_data_source(),
    )
