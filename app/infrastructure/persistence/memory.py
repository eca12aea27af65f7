"""In-memory remote collection client.

A process-local document store with the same contract as the Firestore
adapter: live listeners receive a fresh snapshot after every committed
write, batches are atomic per chunk. Used for local development and to
drive data-source tests, including fault injection.
"""

import copy
import operator
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

import structlog

from infrastructure.operations.result import OperationResult
from infrastructure.persistence.batching import MAX_BATCH_SIZE, chunked
from infrastructure.persistence.models import (
    QueryFilter,
    RemoteQuery,
    Snapshot,
    WriteKind,
    WriteOperation,
)
from infrastructure.persistence.subscription import QueueSubscription

logger = structlog.get_logger()

_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda value, options: value in options,
}


def _split_document_path(path: str) -> tuple[str, str]:
    parts = [part for part in path.split("/") if part]
    if len(parts) < 2 or len(parts) % 2:
        raise ValueError(f"Not a document path: {path}")
    return "/".join(parts[:-1]), parts[-1]


def _matches(document: Dict[str, Any], query_filter: QueryFilter) -> bool:
    compare = _OPERATORS.get(query_filter.op)
    if compare is None:
        raise ValueError(f"Unsupported filter operator: {query_filter.op}")
    if query_filter.field not in document:
        return False
    try:
        return compare(document[query_filter.field], query_filter.value)
    except TypeError:
        return False


class InMemoryCollectionClient:
    """In-memory implementation of RemoteCollectionClient.

    Args:
        deliver_initial_snapshot: Push the current result to a new listener
            immediately, as the real database does. Disable to observe the
            loading window in tests.
    """

    def __init__(self, deliver_initial_snapshot: bool = True) -> None:
        self.deliver_initial_snapshot = deliver_initial_snapshot
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._listeners: Set[QueueSubscription] = set()
        self._get_failures: List[BaseException] = []
        self._write_failures: List[BaseException] = []
        self.subscriptions: List[QueueSubscription] = []
        self.get_calls: List[RemoteQuery] = []
        self.committed_batches: List[int] = []
        self.log = logger.bind(component="memory_collection_client")

    # -- test and seeding helpers -------------------------------------------

    @property
    def active_subscriptions(self) -> List[QueueSubscription]:
        return [sub for sub in self.subscriptions if sub in self._listeners]

    def put_document(self, path: str, data: Dict[str, Any], merge: bool = False) -> None:
        """Write one document outside a batch and notify listeners."""
        self._apply(WriteOperation.set(path, data, merge=merge))
        self._notify({path})

    def delete_document(self, path: str) -> None:
        self._apply(WriteOperation.delete(path))
        self._notify({path})

    def document(self, path: str) -> Optional[Dict[str, Any]]:
        collection, doc_id = _split_document_path(path)
        data = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    def fail_next_get(self, *errors: BaseException) -> None:
        """Make the next ``get_once`` calls raise ``errors`` in order."""
        self._get_failures.extend(errors)

    def fail_next_write(self, *errors: BaseException) -> None:
        """Make the next batch commits raise ``errors`` in order."""
        self._write_failures.extend(errors)

    def emit(self, subscription: QueueSubscription, documents: Sequence[Dict[str, Any]]) -> None:
        """Push an arbitrary snapshot to one listener."""
        subscription.push(Snapshot(documents=tuple(copy.deepcopy(list(documents)))))

    def emit_error(self, path: str, error: BaseException) -> None:
        """Fail every live listener whose query targets ``path``."""
        for sub in list(self._listeners):
            if sub.query.path == path:
                sub.fail(error)

    # -- RemoteCollectionClient ---------------------------------------------

    def subscribe(self, query: RemoteQuery) -> QueueSubscription:
        subscription = QueueSubscription(query, on_close=self._listeners.discard)
        self._listeners.add(subscription)
        self.subscriptions.append(subscription)
        self.log.debug("listener_added", path=query.path, limit=query.limit)
        if self.deliver_initial_snapshot:
            subscription.push(self._evaluate(query))
        return subscription

    async def get_once(self, query: RemoteQuery) -> Snapshot:
        self.get_calls.append(query)
        if self._get_failures:
            raise self._get_failures.pop(0)
        return self._evaluate(query)

    async def batch_write(
        self,
        operations: Sequence[WriteOperation],
        max_batch_size: int = MAX_BATCH_SIZE,
    ) -> OperationResult:
        batches = 0
        for chunk in chunked(operations, max_batch_size):
            if self._write_failures:
                raise self._write_failures.pop(0)
            snapshot = copy.deepcopy(self._collections)
            try:
                for op in chunk:
                    self._apply(op)
            except Exception:
                self._collections = snapshot
                raise
            batches += 1
            self.committed_batches.append(len(chunk))
            self._notify({op.path for op in chunk})

        return OperationResult.success(
            data={"operations": len(operations), "batches": batches},
            message="batch committed",
        )

    # -- internals ----------------------------------------------------------

    def _apply(self, op: WriteOperation) -> None:
        collection, doc_id = _split_document_path(op.path)
        documents = self._collections.setdefault(collection, {})

        if op.kind == WriteKind.DELETE:
            documents.pop(doc_id, None)
        elif op.kind == WriteKind.UPDATE:
            if doc_id not in documents:
                raise KeyError(f"not-found: no document to update at {op.path}")
            documents[doc_id].update(copy.deepcopy(op.data))
        elif op.merge and doc_id in documents:
            documents[doc_id].update(copy.deepcopy(op.data))
        else:
            documents[doc_id] = copy.deepcopy(op.data)

    def _notify(self, paths: Set[str]) -> None:
        paths = {path.strip("/") for path in paths}
        collections = {_split_document_path(path)[0] for path in paths}
        for sub in list(self._listeners):
            target = sub.query.path.strip("/")
            if target in paths or target in collections:
                sub.push(self._evaluate(sub.query))

    def _evaluate(self, query: RemoteQuery) -> Snapshot:
        if query.is_document:
            collection, doc_id = _split_document_path(query.path)
            data = self._collections.get(collection, {}).get(doc_id)
            if data is None:
                return Snapshot()
            return Snapshot(documents=({**copy.deepcopy(data), "id": doc_id},))

        path = "/".join(query.segments)
        documents = [
            {**copy.deepcopy(data), "id": doc_id}
            for doc_id, data in self._collections.get(path, {}).items()
        ]
        documents = [
            doc for doc in documents if all(_matches(doc, f) for f in query.filters)
        ]

        if query.order_by:
            documents = [doc for doc in documents if query.order_by in doc]
            documents.sort(key=lambda doc: doc[query.order_by], reverse=query.descending)
            if query.start_after is not None:
                if query.descending:
                    documents = [
                        doc for doc in documents if doc[query.order_by] < query.start_after
                    ]
                else:
                    documents = [
                        doc for doc in documents if doc[query.order_by] > query.start_after
                    ]

        if query.limit is not None:
            documents = documents[: query.limit]

        return Snapshot(documents=tuple(documents))
