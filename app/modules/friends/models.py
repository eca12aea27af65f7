"""Friend system models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Optional

from pydantic import Field

from infrastructure.models import DocumentModel


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RequestStatus(str, Enum):
    """Status of a friend request."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class SharedItemType(str, Enum):
    """Kind of item shared between friends."""

    WORD = "WORD"
    LEARNING_SHEET = "LEARNING_SHEET"
    QUIZ = "QUIZ"


class SharedItemStatus(str, Enum):
    PENDING = "PENDING"  # Not yet acted upon
    ACCEPTED = "ACCEPTED"  # Added to the recipient's collection
    DISMISSED = "DISMISSED"


class FriendRelation(DocumentModel):
    """A friendship as seen by one user, stored at ``users/{uid}/friends/{friendId}``.

    Each friendship is stored twice, once under each user.
    """

    document_id_field: ClassVar[Optional[str]] = "friend_id"

    friend_id: str = ""
    friend_username: str = ""
    friend_display_name: str = ""
    friend_avatar_url: str = ""
    added_at: datetime = Field(default_factory=_utc_now)


class FriendRequest(DocumentModel):
    """A friend request, stored at ``friend_requests/{requestId}``."""

    document_id_field: ClassVar[Optional[str]] = "request_id"

    request_id: str = ""
    from_user_id: str = ""
    from_username: str = ""
    from_display_name: str = ""
    from_avatar_url: str = ""
    to_user_id: str = ""
    to_username: str = ""
    to_display_name: str = ""
    status: RequestStatus = RequestStatus.PENDING
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class SharedItem(DocumentModel):
    """An item in a user's shared inbox, ``users/{uid}/shared_inbox/{itemId}``."""

    document_id_field: ClassVar[Optional[str]] = "item_id"

    item_id: str = ""
    from_user_id: str = ""
    from_username: str = ""
    to_user_id: str = ""
    type: SharedItemType = SharedItemType.WORD
    content: Dict[str, Any] = Field(default_factory=dict)
    status: SharedItemStatus = SharedItemStatus.PENDING
    created_at: datetime = Field(default_factory=_utc_now)
