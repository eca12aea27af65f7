"""Friend system module: shared friends, requests and inbox data source."""

from modules.friends.data_source import SharedFriendsDataSource
from modules.friends.models import (
    FriendRelation,
    FriendRequest,
    RequestStatus,
    SharedItem,
    SharedItemStatus,
    SharedItemType,
)

__all__ = [
    "SharedFriendsDataSource",
    "FriendRelation",
    "FriendRequest",
    "RequestStatus",
    "SharedItem",
    "SharedItemStatus",
    "SharedItemType",
]
