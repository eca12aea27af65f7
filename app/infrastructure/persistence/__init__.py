"""Remote document database access.

Provides the RemoteCollectionClient protocol, its value types, and two
implementations: the Firestore adapter and an in-memory store.

The Firestore adapter is not imported here so the google-cloud SDK is only
loaded when it is actually selected (see infrastructure.services.providers).
"""

from infrastructure.persistence.batching import MAX_BATCH_SIZE, chunked
from infrastructure.persistence.memory import InMemoryCollectionClient
from infrastructure.persistence.models import (
    QueryFilter,
    RemoteQuery,
    Snapshot,
    WriteKind,
    WriteOperation,
)
from infrastructure.persistence.protocols import (
    RemoteCollectionClient,
    RemoteSubscription,
)
from infrastructure.persistence.subscription import QueueSubscription

__all__ = [
    "MAX_BATCH_SIZE",
    "chunked",
    "InMemoryCollectionClient",
    "QueryFilter",
    "RemoteQuery",
    "Snapshot",
    "WriteKind",
    "WriteOperation",
    "RemoteCollectionClient",
    "RemoteSubscription",
    "QueueSubscription",
]
