"""Firestore implementation of RemoteCollectionClient.

Real-time listeners use the synchronous client's ``on_snapshot`` watch;
its callbacks run on the SDK's own thread and are handed to the event
loop with ``loop.call_soon_threadsafe``. One-off reads and batched writes
use the async client.

The SDK never reports a broken watch to the snapshot callback; it closes
the stream on its own thread. Each subscription therefore polls the
watch's ``is_active`` flag and fails with ``ServiceUnavailable`` once the
watch has stopped without being unsubscribed. The watch is unsubscribed
when the subscription is closed.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

import structlog
from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from infrastructure.configuration.integrations import FirestoreSettings
from infrastructure.operations.classifiers import classify_remote_error
from infrastructure.operations.result import OperationResult
from infrastructure.persistence.batching import MAX_BATCH_SIZE, chunked
from infrastructure.persistence.models import (
    RemoteQuery,
    Snapshot,
    WriteKind,
    WriteOperation,
)
from infrastructure.persistence.subscription import QueueSubscription

logger = structlog.get_logger()


def _to_document(doc: Any) -> Dict[str, Any]:
    data = doc.to_dict() or {}
    return {**data, "id": doc.id}


class FirestoreCollectionClient:
    """Client for Firestore collections and documents.

    Args:
        settings: FirestoreSettings with project and database ids
        client: Optional pre-built synchronous client (listeners)
        async_client: Optional pre-built async client (reads, writes)
    """

    def __init__(
        self,
        settings: FirestoreSettings,
        client: Optional[firestore.Client] = None,
        async_client: Optional[firestore.AsyncClient] = None,
    ) -> None:
        self._settings = settings
        self._client = client or firestore.Client(
            project=settings.PROJECT_ID, database=settings.DATABASE
        )
        self._async_client = async_client or firestore.AsyncClient(
            project=settings.PROJECT_ID, database=settings.DATABASE
        )
        self._watch_poll_interval = settings.WATCH_POLL_INTERVAL
        self._logger = logger.bind(component="firestore_client")

    # -- query building -----------------------------------------------------

    def _build(self, client: Any, query: RemoteQuery) -> Any:
        if query.is_document:
            return client.document(query.path)

        ref = client.collection(query.path)
        for query_filter in query.filters:
            ref = ref.where(
                filter=FieldFilter(query_filter.field, query_filter.op, query_filter.value)
            )
        if query.order_by:
            direction = (
                firestore.Query.DESCENDING if query.descending else firestore.Query.ASCENDING
            )
            ref = ref.order_by(query.order_by, direction=direction)
            if query.start_after is not None:
                ref = ref.start_after({query.order_by: query.start_after})
        if query.limit is not None:
            ref = ref.limit(query.limit)
        return ref

    # -- RemoteCollectionClient ---------------------------------------------

    def subscribe(self, query: RemoteQuery) -> QueueSubscription:
        loop = asyncio.get_running_loop()
        watch: Dict[str, Any] = {}

        def _unsubscribe(_: QueueSubscription) -> None:
            monitor = watch.pop("monitor", None)
            if monitor is not None:
                monitor.cancel()
            handle = watch.pop("handle", None)
            if handle is not None:
                handle.unsubscribe()
            self._logger.debug("listener_removed", path=query.path)

        subscription = QueueSubscription(query, on_close=_unsubscribe)

        def _on_snapshot(docs: Any, changes: Any, read_time: Optional[datetime]) -> None:
            if query.is_document:
                documents = tuple(_to_document(doc) for doc in docs if doc.exists)
            else:
                documents = tuple(_to_document(doc) for doc in docs)
            snapshot = Snapshot(
                documents=documents,
                read_time=read_time or datetime.now(timezone.utc),
            )
            loop.call_soon_threadsafe(subscription.push, snapshot)

        watch["handle"] = self._build(self._client, query).on_snapshot(_on_snapshot)
        watch["monitor"] = loop.create_task(
            self._monitor_watch(query, watch["handle"], subscription),
            name=f"firestore-watch:{query.path}",
        )
        self._logger.debug("listener_added", path=query.path, limit=query.limit)
        return subscription

    async def _monitor_watch(
        self, query: RemoteQuery, handle: Any, subscription: QueueSubscription
    ) -> None:
        while not subscription.closed:
            await asyncio.sleep(self._watch_poll_interval)
            if subscription.closed:
                return
            if not handle.is_active:
                self._logger.warning("listener_stopped", path=query.path)
                subscription.fail(
                    gcp_exceptions.ServiceUnavailable(
                        f"unavailable: listener for {query.path} stopped"
                    )
                )
                return

    async def get_once(self, query: RemoteQuery) -> Snapshot:
        ref = self._build(self._async_client, query)
        if query.is_document:
            doc = await ref.get()
            documents = (_to_document(doc),) if doc.exists else ()
        else:
            documents = tuple([_to_document(doc) async for doc in ref.stream()])
        return Snapshot(documents=documents)

    async def batch_write(
        self,
        operations: Sequence[WriteOperation],
        max_batch_size: int = MAX_BATCH_SIZE,
    ) -> OperationResult:
        batches = 0
        for chunk in chunked(operations, max_batch_size):
            batch = self._async_client.batch()
            for op in chunk:
                ref = self._async_client.document(op.path)
                if op.kind == WriteKind.DELETE:
                    batch.delete(ref)
                elif op.kind == WriteKind.UPDATE:
                    batch.update(ref, op.data)
                else:
                    batch.set(ref, op.data, merge=op.merge)
            try:
                await batch.commit()
            except Exception as exc:
                classified = classify_remote_error(exc)
                self._logger.error(
                    "batch_commit_failed",
                    committed_batches=batches,
                    chunk_size=len(chunk),
                    status=classified.status.value,
                    error_code=classified.error_code,
                    error=str(exc),
                )
                raise
            batches += 1

        return OperationResult.success(
            data={"operations": len(operations), "batches": batches},
            message="batch committed",
        )
