"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.history import HistoryFeatureSettings
from infrastructure.configuration.features.friends import FriendsFeatureSettings

__all__ = [
    "HistoryFeatureSettings",
    "FriendsFeatureSettings",
]
