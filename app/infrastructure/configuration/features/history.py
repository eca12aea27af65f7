"""Translation history feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class HistoryFeatureSettings(FeatureSettings):
    """Translation history configuration.

    Environment Variables:
        HISTORY_VIEW_LIMIT: Default number of records observed (default: 50)
        HISTORY_MAX_LIMIT: Largest row limit a subscription may use (default: 200)
        HISTORY_COUNT_SCAN_LIMIT: Max records read when recomputing per-language
            counts (default: 10000)
        HISTORY_BATCH_CHUNK_SIZE: Records per batched save (default: 490,
            leaves headroom under the 500 operation batch cap)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        limit = settings.history.VIEW_LIMIT
        ```
    """

    VIEW_LIMIT: int = Field(default=50, alias="HISTORY_VIEW_LIMIT")
    MAX_LIMIT: int = Field(default=200, alias="HISTORY_MAX_LIMIT")
    COUNT_SCAN_LIMIT: int = Field(default=10_000, alias="HISTORY_COUNT_SCAN_LIMIT")
    BATCH_CHUNK_SIZE: int = Field(default=490, alias="HISTORY_BATCH_CHUNK_SIZE")
