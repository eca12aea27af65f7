"""Shared user settings data source.

Observes the single settings document of the signed-in user. A missing
document reads as the default settings; a stream error keeps the previous
settings in place.
"""

from typing import Any, Dict, Mapping, Optional

from infrastructure.models import parse_documents
from infrastructure.operations import is_retryable_error
from infrastructure.persistence import RemoteCollectionClient, RemoteQuery, Snapshot
from infrastructure.resilience.retry import RetryExecutor
from infrastructure.subscriptions import (
    MutableState,
    ReadOnlyState,
    SharedSubscriptionDataSource,
)
from modules.user_settings.models import UserSettings

SETTINGS_STREAM = "settings"


def settings_path(user_id: str) -> str:
    return f"users/{user_id}/profile/settings"


def _settings_from_snapshot(snapshot: Snapshot) -> UserSettings:
    parsed = parse_documents(UserSettings, snapshot.documents)
    return parsed[0] if parsed else UserSettings()


class SharedSettingsDataSource(SharedSubscriptionDataSource):
    """Latest settings of the signed-in user."""

    domain = "user_settings"

    def __init__(
        self,
        client: RemoteCollectionClient,
        retry: Optional[RetryExecutor] = None,
    ) -> None:
        super().__init__(client)
        self._retry = retry or RetryExecutor(should_retry=is_retryable_error)
        self._settings: MutableState[UserSettings] = MutableState(UserSettings())

    def observe(self) -> ReadOnlyState[UserSettings]:
        return self._settings.as_read_only()

    def start_observing(self, user_id: str) -> bool:
        return super().start_observing(user_id)

    async def fetch_once(self, user_id: str) -> UserSettings:
        """Read the settings once without touching the live subscription."""
        query = RemoteQuery(settings_path(user_id))
        snapshot = await self._retry.run(
            lambda: self._client.get_once(query),
            operation_name="settings_fetch_once",
            should_retry=is_retryable_error,
        )
        return _settings_from_snapshot(snapshot)

    def update_cache(self, settings: UserSettings) -> None:
        """Publish settings the caller just wrote, ahead of the listener."""
        self._settings.set(settings)

    def _build_queries(
        self, user_id: str, params: Mapping[str, Any]
    ) -> Dict[str, RemoteQuery]:
        return {SETTINGS_STREAM: RemoteQuery(settings_path(user_id))}

    def _on_snapshot(self, stream: str, snapshot: Snapshot) -> None:
        self._settings.set(_settings_from_snapshot(snapshot))

    def _reset(self) -> None:
        self._settings.set(UserSettings())
