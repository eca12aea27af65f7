"""Remote access to translation history.

Records live at ``users/{uid}/history/{recordId}``. Every remote call goes
through the retry executor with the text-based retry classifier, so
transient network failures are retried and permission or validation
failures surface immediately.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from infrastructure.logging import get_module_logger
from infrastructure.models import parse_documents
from infrastructure.operations import OperationResult, is_retryable_error
from infrastructure.persistence import (
    MAX_BATCH_SIZE,
    RemoteCollectionClient,
    RemoteQuery,
    Snapshot,
    WriteOperation,
    chunked,
)
from infrastructure.resilience.retry import RetryExecutor
from modules.history.models import TranslationRecord, count_languages

logger = get_module_logger()

DEFAULT_BATCH_CHUNK_SIZE = 490
DEFAULT_COUNT_SCAN_LIMIT = 10_000


def history_path(user_id: str) -> str:
    return f"users/{user_id}/history"


def records_from_snapshot(snapshot: Snapshot) -> List[TranslationRecord]:
    return parse_documents(TranslationRecord, snapshot.documents)


class HistoryRepository:
    """Translation history persistence.

    Args:
        client: Remote collection client
        retry: Retry executor for remote calls
        batch_chunk_size: Records per atomic batch in ``save_batch``
        count_scan_limit: Max records read by ``language_counts``
        max_batch_size: Hard operation cap of one remote batch
    """

    def __init__(
        self,
        client: RemoteCollectionClient,
        retry: Optional[RetryExecutor] = None,
        batch_chunk_size: int = DEFAULT_BATCH_CHUNK_SIZE,
        count_scan_limit: int = DEFAULT_COUNT_SCAN_LIMIT,
        max_batch_size: int = MAX_BATCH_SIZE,
    ) -> None:
        if batch_chunk_size > max_batch_size:
            raise ValueError("batch_chunk_size must not exceed max_batch_size")
        self._client = client
        self._retry = retry or RetryExecutor(should_retry=is_retryable_error)
        self.batch_chunk_size = batch_chunk_size
        self.count_scan_limit = count_scan_limit
        self.max_batch_size = max_batch_size

    def history_query(self, user_id: str, limit: int) -> RemoteQuery:
        """Most recent records first."""
        return (
            RemoteQuery(history_path(user_id))
            .ordered("timestamp", descending=True)
            .limited(limit)
        )

    async def save(self, record: TranslationRecord) -> OperationResult:
        """Create or overwrite one record; assigns an id when missing."""
        return await self.save_batch([record])

    async def save_batch(self, records: Sequence[TranslationRecord]) -> OperationResult:
        """Save records in atomic chunks, retrying each chunk.

        A chunk that still fails after retries raises; chunks committed
        before it stay committed.

        Returns:
            SUCCESS result with ``{"records": [...ids], "batches": k}``
        """
        if not records:
            return OperationResult.success(data={"records": [], "batches": 0})

        prepared = [self._with_id(record) for record in records]
        batches = 0
        for chunk in chunked(prepared, self.batch_chunk_size):
            operations = [
                WriteOperation.set(
                    f"{history_path(record.user_id)}/{record.id}", record.to_document()
                )
                for record in chunk
            ]
            await self._retry.run(
                lambda operations=operations: self._client.batch_write(
                    operations, max_batch_size=self.max_batch_size
                ),
                operation_name="history_save_batch",
                should_retry=is_retryable_error,
            )
            batches += 1

        logger.info("history_saved", records=len(prepared), batches=batches)
        return OperationResult.success(
            data={"records": [record.id for record in prepared], "batches": batches},
            message=f"saved {len(prepared)} records",
        )

    async def delete(self, user_id: str, record_id: str) -> OperationResult:
        if not record_id:
            raise ValueError("record_id is required")
        await self._retry.run(
            lambda: self._client.batch_write(
                [WriteOperation.delete(f"{history_path(user_id)}/{record_id}")]
            ),
            operation_name="history_delete",
            should_retry=is_retryable_error,
        )
        logger.info("history_deleted", user_id=user_id, record_id=record_id)
        return OperationResult.success(data={"record_id": record_id})

    async def load_more(
        self, user_id: str, limit: int, before: datetime
    ) -> List[TranslationRecord]:
        """Page of records older than ``before`` (cursor pagination)."""
        query = self.history_query(user_id, limit).after(before)
        snapshot = await self._retry.run(
            lambda: self._client.get_once(query),
            operation_name="history_load_more",
            should_retry=is_retryable_error,
        )
        return records_from_snapshot(snapshot)

    async def language_counts(self, user_id: str) -> Dict[str, int]:
        """Per-language record counts across all records.

        Reads up to ``count_scan_limit`` records, independent of any display
        limit.
        """
        query = RemoteQuery(history_path(user_id)).limited(self.count_scan_limit)
        snapshot = await self._retry.run(
            lambda: self._client.get_once(query),
            operation_name="history_language_counts",
            should_retry=is_retryable_error,
        )
        counts = count_languages(records_from_snapshot(snapshot))
        if len(snapshot) >= self.count_scan_limit:
            logger.warning(
                "history_count_scan_truncated",
                user_id=user_id,
                scan_limit=self.count_scan_limit,
            )
        return counts

    @staticmethod
    def _with_id(record: TranslationRecord) -> TranslationRecord:
        if not record.user_id:
            raise ValueError("record.user_id is required")
        if record.id:
            return record
        update: Dict[str, Any] = {"id": uuid.uuid4().hex}
        return record.model_copy(update=update)
