"""Friends feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class FriendsFeatureSettings(FeatureSettings):
    """Friend system configuration.

    Environment Variables:
        FRIENDS_LIST_LIMIT: Max friends observed (default: 100)
        FRIEND_REQUESTS_LIMIT: Max pending incoming requests observed (default: 100)
    """

    LIST_LIMIT: int = Field(default=100, alias="FRIENDS_LIST_LIMIT")
    REQUESTS_LIMIT: int = Field(default=100, alias="FRIEND_REQUESTS_LIMIT")
