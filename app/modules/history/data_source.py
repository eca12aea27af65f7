"""Shared translation history data source.

Every consumer of the history list (history screen, learning, word bank)
observes the same cached records, so one remote listener serves them all.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from infrastructure.logging import get_module_logger
from infrastructure.persistence import RemoteCollectionClient, RemoteQuery, Snapshot
from infrastructure.subscriptions import (
    MutableState,
    ReadOnlyState,
    SharedSubscriptionDataSource,
)
from modules.history.models import TranslationRecord
from modules.history.repository import HistoryRepository, records_from_snapshot

logger = get_module_logger()

HISTORY_STREAM = "history"

RecordPredicate = Callable[[TranslationRecord], bool]


class SharedHistoryDataSource(SharedSubscriptionDataSource):
    """Latest history records for the signed-in user.

    Args:
        client: Remote collection client
        repository: History repository (queries and one-off reads)
        view_limit: Row limit used when ``start_observing`` gets none
        max_limit: Largest accepted row limit
    """

    domain = "history"

    def __init__(
        self,
        client: RemoteCollectionClient,
        repository: HistoryRepository,
        view_limit: int = 50,
        max_limit: int = 200,
    ) -> None:
        if not 0 < view_limit <= max_limit:
            raise ValueError("view_limit must be between 1 and max_limit")
        super().__init__(client)
        self._repository = repository
        self.view_limit = view_limit
        self.max_limit = max_limit
        self._records: MutableState[List[TranslationRecord]] = MutableState([])
        self._history_count: MutableState[int] = MutableState(0)
        self._language_counts: MutableState[Dict[str, int]] = MutableState({})

    def observe(self) -> ReadOnlyState[List[TranslationRecord]]:
        return self._records.as_read_only()

    @property
    def history_count(self) -> ReadOnlyState[int]:
        """Number of records currently cached (bounded by the limit)."""
        return self._history_count.as_read_only()

    @property
    def language_counts(self) -> ReadOnlyState[Dict[str, int]]:
        """Per-language counts across all records, see refresh_language_counts."""
        return self._language_counts.as_read_only()

    @property
    def current_limit(self) -> Optional[int]:
        return self.handle.params.get("limit") if self.handle else None

    def start_observing(self, user_id: str, limit: Optional[int] = None) -> bool:
        return super().start_observing(user_id, limit=limit)

    def update_limit(self, new_limit: int) -> bool:
        """Resubscribe with ``new_limit`` for the current user.

        Returns:
            False when nothing is observed or the limit is unchanged.
        """
        user_id = self.current_user_id
        if user_id is None:
            return False
        return self.start_observing(user_id, limit=new_limit)

    async def refresh_language_counts(self) -> bool:
        """Recompute per-language counts from every record once.

        Runs outside the live subscription and may be cancelled by the
        caller. On failure the previous counts stay published.

        Returns:
            True if new counts were published.
        """
        handle = self.handle
        if handle is None:
            return False

        try:
            counts = await self._repository.language_counts(handle.user_id)
        except Exception as e:
            self.log.warning(
                "language_counts_refresh_failed",
                user_id=handle.user_id,
                error=str(e),
            )
            return False

        if self.current_user_id != handle.user_id:
            self.log.debug("language_counts_discarded", user_id=handle.user_id)
            return False

        self._language_counts.set(counts)
        return True

    # -- derived reads over the cached records ------------------------------

    def filter_records(self, predicate: RecordPredicate) -> List[TranslationRecord]:
        return [record for record in self._records.value if predicate(record)]

    def count_records(self, predicate: RecordPredicate) -> int:
        return sum(1 for record in self._records.value if predicate(record))

    def records_for_language(self, language_code: str) -> List[TranslationRecord]:
        return self.filter_records(lambda r: r.involves_language(language_code))

    def count_for_language(self, language_code: str) -> int:
        return self.count_records(lambda r: r.involves_language(language_code))

    # -- SharedSubscriptionDataSource hooks ---------------------------------

    def _resolve_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        limit = params.get("limit")
        if limit is None:
            limit = self.view_limit
        if not 0 < limit <= self.max_limit:
            raise ValueError(f"limit must be between 1 and {self.max_limit}, got {limit}")
        return {"limit": limit}

    def _build_queries(
        self, user_id: str, params: Mapping[str, Any]
    ) -> Dict[str, RemoteQuery]:
        return {HISTORY_STREAM: self._repository.history_query(user_id, params["limit"])}

    def _on_snapshot(self, stream: str, snapshot: Snapshot) -> None:
        records = records_from_snapshot(snapshot)
        self._records.set(records)
        self._history_count.set(len(records))

    def _reset(self) -> None:
        self._records.set([])
        self._history_count.set(0)
        self._language_counts.set({})
