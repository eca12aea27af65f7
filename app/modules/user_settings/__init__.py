"""User settings module."""

from modules.user_settings.data_source import SharedSettingsDataSource, settings_path
from modules.user_settings.models import (
    BASE_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    UserSettings,
)

__all__ = [
    "SharedSettingsDataSource",
    "settings_path",
    "UserSettings",
    "BASE_HISTORY_LIMIT",
    "MAX_HISTORY_LIMIT",
]
