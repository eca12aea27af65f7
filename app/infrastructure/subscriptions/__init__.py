"""Shared subscription data sources and observable state.

Exports:
    SharedSubscriptionDataSource: Base class for per-domain data sources
    SubscriptionHandle: Live remote subscription(s) for one user
    DataSourceState: IDLE / LOADING / ACTIVE / ACTIVE_WITH_ERROR
    MutableState / ReadOnlyState: Replay-latest state cells
    derived_state: State computed from other states
"""

from infrastructure.subscriptions.data_source import SharedSubscriptionDataSource
from infrastructure.subscriptions.models import (
    DataSourceState,
    StreamBinding,
    SubscriptionHandle,
)
from infrastructure.subscriptions.state import (
    MutableState,
    ReadOnlyState,
    derived_state,
)

__all__ = [
    "SharedSubscriptionDataSource",
    "DataSourceState",
    "StreamBinding",
    "SubscriptionHandle",
    "MutableState",
    "ReadOnlyState",
    "derived_state",
]
