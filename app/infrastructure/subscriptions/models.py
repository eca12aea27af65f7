"""Subscription lifecycle models."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Set

from infrastructure.persistence.protocols import RemoteSubscription


class DataSourceState(Enum):
    """Lifecycle state of a shared data source.

    Attributes:
        IDLE: No subscription, defaults cached
        LOADING: Subscription requested, no snapshot received yet
        ACTIVE: Latest snapshot cached
        ACTIVE_WITH_ERROR: A stream failed; last good data retained
    """

    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"
    ACTIVE_WITH_ERROR = "active_with_error"


@dataclass
class StreamBinding:
    """One remote listener and the task consuming it."""

    subscription: RemoteSubscription
    task: Optional["asyncio.Task[None]"] = None


@dataclass
class SubscriptionHandle:
    """The live remote subscription(s) of one data source for one user.

    A handle owns one stream per named query (history has one, friends
    three). It is replaced as a whole when the user or parameters change.
    """

    user_id: str
    params: Mapping[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    streams: Dict[str, StreamBinding] = field(default_factory=dict)
    pending: Set[str] = field(default_factory=set)
    cancelled: bool = False

    @property
    def is_active(self) -> bool:
        """True while every stream is still delivering."""
        if self.cancelled or not self.streams:
            return False
        return all(
            binding.task is not None and not binding.task.done()
            for binding in self.streams.values()
        )

    def matches(self, user_id: str, params: Mapping[str, Any]) -> bool:
        return self.user_id == user_id and dict(self.params) == dict(params)

    def add_stream(self, name: str, binding: StreamBinding) -> None:
        self.streams[name] = binding
        self.pending.add(name)

    def mark_reported(self, name: str) -> bool:
        """Record the first event of stream ``name``.

        Returns:
            True once every stream has reported at least once.
        """
        self.pending.discard(name)
        return not self.pending

    def cancel(self) -> None:
        """Remove every remote listener and cancel the consumer tasks.

        Listeners are closed first so no queued snapshot is delivered after
        this returns. Safe to call more than once.
        """
        if self.cancelled:
            return
        self.cancelled = True
        for binding in self.streams.values():
            binding.subscription.close()
            if binding.task is not None and not binding.task.done():
                binding.task.cancel()
