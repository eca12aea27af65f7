"""Translation history module.

Provides the shared history data source (one live listener per signed-in
user) and the repository used for writes and one-off reads.
"""

from modules.history.data_source import SharedHistoryDataSource
from modules.history.models import TranslationRecord, count_languages
from modules.history.repository import (
    HistoryRepository,
    history_path,
    records_from_snapshot,
)

__all__ = [
    "SharedHistoryDataSource",
    "TranslationRecord",
    "count_languages",
    "HistoryRepository",
    "history_path",
    "records_from_snapshot",
]
