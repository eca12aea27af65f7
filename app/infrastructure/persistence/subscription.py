"""Queue-backed implementation of RemoteSubscription.

Clients push snapshots (or a failure) into the subscription from their
listener callback; the consumer iterates it on the event loop.
"""

import asyncio
from typing import Callable, Optional, Union

from infrastructure.persistence.models import RemoteQuery, Snapshot

_CLOSED = object()


class QueueSubscription:
    """Bridges push-style listener callbacks to an async iterator.

    ``push``/``fail`` must run on the event loop thread; clients whose
    callbacks arrive on another thread schedule them with
    ``loop.call_soon_threadsafe``.
    """

    def __init__(
        self,
        query: RemoteQuery,
        on_close: Optional[Callable[["QueueSubscription"], None]] = None,
    ) -> None:
        self.query = query
        self._queue: "asyncio.Queue[Union[Snapshot, BaseException, object]]" = (
            asyncio.Queue()
        )
        self._closed = False
        self._on_close = on_close

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, snapshot: Snapshot) -> None:
        if not self._closed:
            self._queue.put_nowait(snapshot)

    def fail(self, exc: BaseException) -> None:
        if not self._closed:
            self._queue.put_nowait(exc)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # wake a pending __anext__
        self._queue.put_nowait(_CLOSED)
        if self._on_close is not None:
            self._on_close(self)

    def __aiter__(self) -> "QueueSubscription":
        return self

    async def __anext__(self) -> Snapshot:
        if self._closed:
            raise StopAsyncIteration
        item = await self._queue.get()
        if self._closed or item is _CLOSED:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            self.close()
            raise item
        return item  # type: ignore[return-value]
