"""Shared subscription data source base class.

One instance per data domain per process. It owns at most one
SubscriptionHandle (one remote listener per named stream) for the signed-in
user and publishes the latest snapshot through MutableState cells, so any
number of consumers share a single remote subscription.

State transitions:
- start_observing: IDLE/ACTIVE -> LOADING (replacing any prior handle)
- snapshot event: LOADING/ACTIVE -> ACTIVE
- stream error: LOADING/ACTIVE -> ACTIVE_WITH_ERROR (last good data kept)
- stop_observing: any -> IDLE

All mutations run on the event loop that called start_observing. Events
from a handle that is no longer the current one are dropped.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

import structlog

from infrastructure.persistence.models import RemoteQuery, Snapshot
from infrastructure.persistence.protocols import (
    RemoteCollectionClient,
    RemoteSubscription,
)
from infrastructure.subscriptions.models import (
    DataSourceState,
    StreamBinding,
    SubscriptionHandle,
)
from infrastructure.subscriptions.state import MutableState, ReadOnlyState

logger = structlog.get_logger()


class SharedSubscriptionDataSource(ABC):
    """Base class for per-domain shared data sources.

    Subclasses declare their remote queries, how a snapshot updates their
    cached cells, and how to reset those cells.

    Attributes:
        domain: Short domain name used in logs and task names
    """

    domain: str = "shared"

    def __init__(self, client: RemoteCollectionClient) -> None:
        self._client = client
        self._handle: Optional[SubscriptionHandle] = None
        self._state: MutableState[DataSourceState] = MutableState(DataSourceState.IDLE)
        self._is_loading: MutableState[bool] = MutableState(False)
        self._error: MutableState[Optional[str]] = MutableState(None)
        self.log = logger.bind(component="shared_data_source", domain=self.domain)

    # -- read-only views ----------------------------------------------------

    @property
    def state(self) -> ReadOnlyState[DataSourceState]:
        return self._state.as_read_only()

    @property
    def is_loading(self) -> ReadOnlyState[bool]:
        return self._is_loading.as_read_only()

    @property
    def error(self) -> ReadOnlyState[Optional[str]]:
        return self._error.as_read_only()

    @property
    def current_user_id(self) -> Optional[str]:
        return self._handle.user_id if self._handle else None

    @property
    def handle(self) -> Optional[SubscriptionHandle]:
        return self._handle

    @abstractmethod
    def observe(self) -> ReadOnlyState[Any]:
        """The domain's primary cached value."""

    # -- subclass hooks -----------------------------------------------------

    @abstractmethod
    def _build_queries(
        self, user_id: str, params: Mapping[str, Any]
    ) -> Dict[str, RemoteQuery]:
        """Named remote queries to listen to for ``user_id``."""

    @abstractmethod
    def _on_snapshot(self, stream: str, snapshot: Snapshot) -> None:
        """Replace the cached value(s) fed by ``stream``."""

    @abstractmethod
    def _reset(self) -> None:
        """Restore every cached value to its default."""

    def _resolve_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Fill defaults and validate domain parameters."""
        return params

    def _on_stream_error(self, stream: str, exc: Exception) -> None:
        """Hook for domain-specific error handling; data is retained."""

    # -- lifecycle ----------------------------------------------------------

    def start_observing(self, user_id: str, **params: Any) -> bool:
        """Ensure one live subscription for ``user_id`` and ``params``.

        Idempotent: when the current handle is still delivering for the same
        user and parameters nothing happens. Otherwise the current handle is
        cancelled before the new listeners are registered. Returns without
        waiting for the first snapshot.

        Args:
            user_id: Signed-in user
            **params: Domain parameters (e.g. ``limit`` for history)

        Returns:
            True if a new subscription was established, False if reused.

        Raises:
            RuntimeError: Called without a running event loop; no state is
                changed.
        """
        if not user_id:
            raise ValueError("user_id is required")

        loop = asyncio.get_running_loop()
        resolved = self._resolve_params(dict(params))
        current = self._handle

        if current is not None and current.is_active and current.matches(user_id, resolved):
            self.log.debug("subscription_reused", user_id=user_id, params=resolved)
            return False

        if current is not None:
            self._cancel(current, reason="replaced")
            if current.user_id != user_id:
                self._reset()

        handle = SubscriptionHandle(user_id=user_id, params=resolved)
        self._handle = handle
        self._is_loading.set(True)
        self._error.set(None)
        self._state.set(DataSourceState.LOADING)

        try:
            for name, query in self._build_queries(user_id, resolved).items():
                subscription = self._client.subscribe(query)
                binding = StreamBinding(subscription)
                handle.add_stream(name, binding)
                binding.task = loop.create_task(
                    self._consume(handle, name, subscription),
                    name=f"{self.domain}:{name}:{user_id}",
                )
        except Exception:
            self.log.error("subscription_start_failed", user_id=user_id, exc_info=True)
            self._handle = None
            handle.cancel()
            self._is_loading.set(False)
            self._state.set(DataSourceState.IDLE)
            raise

        self.log.info(
            "subscription_started",
            user_id=user_id,
            params=resolved,
            streams=sorted(handle.streams),
        )
        return True

    def stop_observing(self) -> None:
        """Cancel the subscription and reset every cell to its default.

        Safe to call with no active subscription. Must be called on logout.
        """
        handle = self._handle
        self._handle = None
        if handle is not None:
            self._cancel(handle, reason="stopped")

        self._reset()
        self._is_loading.set(False)
        self._error.set(None)
        self._state.set(DataSourceState.IDLE)
        self.log.info("observing_stopped", had_subscription=handle is not None)

    # -- event handling -----------------------------------------------------

    def _cancel(self, handle: SubscriptionHandle, reason: str) -> None:
        handle.cancel()
        self.log.info(
            "subscription_cancelled",
            user_id=handle.user_id,
            reason=reason,
            created_at=handle.created_at.isoformat(),
        )

    def _is_current(self, handle: SubscriptionHandle) -> bool:
        return handle is self._handle and not handle.cancelled

    async def _consume(
        self,
        handle: SubscriptionHandle,
        stream: str,
        subscription: RemoteSubscription,
    ) -> None:
        try:
            async for snapshot in subscription:
                if not self._is_current(handle):
                    return
                self._apply_snapshot(handle, stream, snapshot)
        except Exception as exc:
            if self._is_current(handle):
                self._apply_error(handle, stream, exc)
        finally:
            subscription.close()

    def _apply_snapshot(
        self, handle: SubscriptionHandle, stream: str, snapshot: Snapshot
    ) -> None:
        self._on_snapshot(stream, snapshot)
        if handle.mark_reported(stream):
            self._is_loading.set(False)
        if self._state.value != DataSourceState.ACTIVE_WITH_ERROR:
            self._state.set(DataSourceState.ACTIVE)

    def _apply_error(
        self, handle: SubscriptionHandle, stream: str, exc: Exception
    ) -> None:
        self.log.warning(
            "subscription_error",
            user_id=handle.user_id,
            stream=stream,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        self._on_stream_error(stream, exc)
        handle.mark_reported(stream)
        self._is_loading.set(False)
        self._error.set(str(exc) or type(exc).__name__)
        self._state.set(DataSourceState.ACTIVE_WITH_ERROR)
