"""Session-scoped ownership of the shared data sources.

The session owner is the only component that starts and stops the shared
data sources: on login it starts settings, history and friends observation
for the user, on logout it stops all of them before returning. Stream
errors are never retried automatically; ``retry()`` re-establishes any
subscription that ended after an explicit user action.
"""

from typing import Callable, Optional

from infrastructure.logging import bind_session_context, get_module_logger
from modules.friends import SharedFriendsDataSource
from modules.history import SharedHistoryDataSource
from modules.user_settings import SharedSettingsDataSource, UserSettings

logger = get_module_logger()


class SessionObservers:
    """Starts and stops the per-user shared data sources together.

    The history row limit follows the user's ``history_view_limit``
    setting while the session is active.
    """

    def __init__(
        self,
        settings_source: SharedSettingsDataSource,
        history_source: SharedHistoryDataSource,
        friends_source: SharedFriendsDataSource,
    ) -> None:
        self.settings_source = settings_source
        self.history_source = history_source
        self.friends_source = friends_source
        self._user_id: Optional[str] = None
        self._remove_limit_listener: Optional[Callable[[], None]] = None

    @property
    def current_user_id(self) -> Optional[str]:
        return self._user_id

    def login(self, user_id: str) -> None:
        """Start every data source for ``user_id``.

        Must be called from the event loop. Logging in as another user
        first logs the previous user out.
        """
        if self._user_id is not None and self._user_id != user_id:
            self.logout()

        with bind_session_context(user_id=user_id):
            self.settings_source.start_observing(user_id)
            limit = self._history_limit(self.settings_source.observe().value)
            self.history_source.start_observing(user_id, limit=limit)
            self.friends_source.start_observing(user_id)

            if self._remove_limit_listener is None:
                self._remove_limit_listener = (
                    self.settings_source.observe().add_listener(self._on_settings_changed)
                )
            self._user_id = user_id
            logger.info("session_observers_started", history_limit=limit)

    def logout(self) -> None:
        """Stop every data source and reset their caches."""
        if self._remove_limit_listener is not None:
            self._remove_limit_listener()
            self._remove_limit_listener = None

        user_id = self._user_id
        self._user_id = None
        self.history_source.stop_observing()
        self.friends_source.stop_observing()
        self.settings_source.stop_observing()
        logger.info("session_observers_stopped", user_id=user_id)

    def retry(self) -> bool:
        """Re-establish subscriptions for the current user.

        Live subscriptions are reused; only ended ones are recreated.

        Returns:
            False when no user is logged in.
        """
        if self._user_id is None:
            return False
        logger.info("session_observers_retry", user_id=self._user_id)
        self.login(self._user_id)
        return True

    def _history_limit(self, settings: UserSettings) -> int:
        return max(1, min(settings.history_view_limit, self.history_source.max_limit))

    def _on_settings_changed(self, settings: UserSettings) -> None:
        if self._user_id is None:
            return
        limit = self._history_limit(settings)
        # runs inside the settings stream; a history failure must stay in history
        try:
            self.history_source.update_limit(limit)
        except Exception as e:
            logger.warning(
                "history_limit_update_failed",
                user_id=self._user_id,
                limit=limit,
                error=str(e),
            )
