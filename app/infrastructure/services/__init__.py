"""
Dependency injection services.

Provides the process-scoped provider functions.
"""

from infrastructure.services.providers import (
    get_settings,
    get_collection_client,
    get_retry_executor,
    get_function_client,
    get_history_repository,
    get_history_data_source,
    get_friends_data_source,
    get_settings_data_source,
    get_session_observers,
)

__all__ = [
    "get_settings",
    "get_collection_client",
    "get_retry_executor",
    "get_function_client",
    "get_history_repository",
    "get_history_data_source",
    "get_friends_data_source",
    "get_settings_data_source",
    "get_session_observers",
]
