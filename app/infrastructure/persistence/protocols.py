"""Protocols for the remote document database.

The data sources and repositories only depend on these protocols; the
Firestore adapter and the in-memory store implement them.
"""

from typing import AsyncIterator, Protocol, Sequence, runtime_checkable

from infrastructure.operations.result import OperationResult
from infrastructure.persistence.batching import MAX_BATCH_SIZE
from infrastructure.persistence.models import RemoteQuery, Snapshot, WriteOperation


@runtime_checkable
class RemoteSubscription(Protocol):
    """A live query: an async stream of snapshots with explicit unsubscribe.

    Iteration yields every snapshot in delivery order. A stream failure is
    raised from the iterator and ends the stream. ``close()`` removes the
    remote listener synchronously; after it returns no further snapshot is
    yielded, even if one was already queued.
    """

    query: RemoteQuery

    @property
    def closed(self) -> bool: ...

    def close(self) -> None: ...

    def __aiter__(self) -> AsyncIterator[Snapshot]: ...

    async def __anext__(self) -> Snapshot: ...


@runtime_checkable
class RemoteCollectionClient(Protocol):
    """Document CRUD, real-time listeners and atomic batched writes."""

    def subscribe(self, query: RemoteQuery) -> RemoteSubscription:
        """Register a real-time listener for ``query``.

        Must be called from the event loop that will consume the stream.
        """
        ...

    async def get_once(self, query: RemoteQuery) -> Snapshot:
        """Read the current result of ``query`` once."""
        ...

    async def batch_write(
        self,
        operations: Sequence[WriteOperation],
        max_batch_size: int = MAX_BATCH_SIZE,
    ) -> OperationResult:
        """Commit ``operations`` in atomic chunks of at most ``max_batch_size``.

        Returns:
            SUCCESS result with data ``{"operations": n, "batches": k}``

        Raises:
            Exception: The remote failure of the first chunk that did not commit.
                Earlier chunks stay committed.
        """
        ...
