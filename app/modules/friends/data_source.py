"""Shared friend system data source.

One handle holds three live listeners for the signed-in user: the friends
list, incoming pending friend requests and the pending shared inbox. The
friends screen, the inbox screen and the notification badges all read the
same cached values.
"""

from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from infrastructure.models import parse_documents
from infrastructure.persistence import RemoteCollectionClient, RemoteQuery, Snapshot
from infrastructure.subscriptions import (
    MutableState,
    ReadOnlyState,
    SharedSubscriptionDataSource,
    derived_state,
)
from modules.friends.models import (
    FriendRelation,
    FriendRequest,
    RequestStatus,
    SharedItem,
    SharedItemStatus,
)

FRIENDS_STREAM = "friends"
REQUESTS_STREAM = "incoming_requests"
INBOX_STREAM = "shared_inbox"


class SharedFriendsDataSource(SharedSubscriptionDataSource):
    """Friends, incoming requests and shared inbox for the signed-in user.

    Args:
        client: Remote collection client
        friends_limit: Max friends observed
        requests_limit: Max pending incoming requests observed
    """

    domain = "friends"

    def __init__(
        self,
        client: RemoteCollectionClient,
        friends_limit: int = 100,
        requests_limit: int = 100,
    ) -> None:
        super().__init__(client)
        self.friends_limit = friends_limit
        self.requests_limit = requests_limit
        self._friends: MutableState[List[FriendRelation]] = MutableState([])
        self._incoming_requests: MutableState[List[FriendRequest]] = MutableState([])
        self._pending_items: MutableState[List[SharedItem]] = MutableState([])
        self._seen_item_ids: MutableState[FrozenSet[str]] = MutableState(frozenset())
        self._usernames: Dict[str, str] = {}
        self._unseen_count = derived_state(
            [self._pending_items, self._seen_item_ids],
            lambda: sum(
                1
                for item in self._pending_items.value
                if item.item_id not in self._seen_item_ids.value
            ),
        )

    def observe(self) -> ReadOnlyState[List[FriendRelation]]:
        return self._friends.as_read_only()

    @property
    def friends(self) -> ReadOnlyState[List[FriendRelation]]:
        return self._friends.as_read_only()

    @property
    def incoming_requests(self) -> ReadOnlyState[List[FriendRequest]]:
        return self._incoming_requests.as_read_only()

    @property
    def pending_shared_items(self) -> ReadOnlyState[List[SharedItem]]:
        return self._pending_items.as_read_only()

    @property
    def unseen_shared_item_count(self) -> ReadOnlyState[int]:
        """Pending inbox items the user has not seen yet (badge count)."""
        return self._unseen_count

    def start_observing(self, user_id: str) -> bool:
        return super().start_observing(user_id)

    def mark_shared_items_seen(self) -> None:
        """Mark every currently pending inbox item as seen."""
        current = {item.item_id for item in self._pending_items.value}
        self._seen_item_ids.set(self._seen_item_ids.value | current)

    def cache_own_username(self, user_id: str, username: str) -> None:
        if username.strip():
            self._usernames[user_id] = username

    def cached_username(self, user_id: str) -> Optional[str]:
        return self._usernames.get(user_id)

    def is_friend(self, friend_id: str) -> bool:
        return any(rel.friend_id == friend_id for rel in self._friends.value)

    # -- SharedSubscriptionDataSource hooks ---------------------------------

    def _build_queries(
        self, user_id: str, params: Mapping[str, Any]
    ) -> Dict[str, RemoteQuery]:
        return {
            FRIENDS_STREAM: RemoteQuery(f"users/{user_id}/friends")
            .ordered("addedAt", descending=True)
            .limited(self.friends_limit),
            REQUESTS_STREAM: RemoteQuery("friend_requests")
            .where("toUserId", "==", user_id)
            .where("status", "==", RequestStatus.PENDING.value)
            .ordered("createdAt", descending=True)
            .limited(self.requests_limit),
            INBOX_STREAM: RemoteQuery(f"users/{user_id}/shared_inbox")
            .where("status", "==", SharedItemStatus.PENDING.value)
            .ordered("createdAt", descending=True),
        }

    def _on_snapshot(self, stream: str, snapshot: Snapshot) -> None:
        if stream == FRIENDS_STREAM:
            friends = parse_documents(FriendRelation, snapshot.documents)
            for rel in friends:
                if rel.friend_username.strip():
                    self._usernames[rel.friend_id] = rel.friend_username
            self._friends.set(friends)
        elif stream == REQUESTS_STREAM:
            requests = parse_documents(FriendRequest, snapshot.documents)
            self._incoming_requests.set(requests)
        elif stream == INBOX_STREAM:
            items = parse_documents(SharedItem, snapshot.documents)
            self._pending_items.set(items)
            # Forget seen ids of items no longer pending
            pending_ids = {item.item_id for item in items}
            self._seen_item_ids.set(self._seen_item_ids.value & pending_ids)

    def _reset(self) -> None:
        self._friends.set([])
        self._incoming_requests.set([])
        self._pending_items.set([])
        self._seen_item_ids.set(frozenset())
        self._usernames.clear()
