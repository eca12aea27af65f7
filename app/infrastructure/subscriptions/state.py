"""Observable state cells with replay-latest semantics.

MutableState holds one value. Readers get a ReadOnlyState view: ``value``
for synchronous reads and ``subscribe()`` for an async stream that starts
with the current value and then yields each later distinct value.

Each subscriber has a one-slot buffer. Publishing never waits on a
subscriber; a slow subscriber skips intermediate values and always
resumes at the latest one, in publication order.
"""

import asyncio
from typing import AsyncIterator, Callable, Generic, List, Set, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")
R = TypeVar("R")


def _offer_latest(queue: "asyncio.Queue[T]", value: T) -> None:
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(value)


class ReadOnlyState(Generic[T]):
    """Read-only view of a state cell."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: Set["asyncio.Queue[T]"] = set()
        self._listeners: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def subscribe(self) -> AsyncIterator[T]:
        """Yield the current value, then every later distinct value."""
        queue: "asyncio.Queue[T]" = asyncio.Queue(maxsize=1)
        queue.put_nowait(self._value)
        self._subscribers.add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._subscribers.discard(queue)

    def add_listener(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Call ``listener`` synchronously on every change.

        A listener that raises is logged and skipped; the writer and the
        other listeners are not affected.

        Returns:
            A function removing the listener.
        """
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove


class MutableState(ReadOnlyState[T]):
    """State cell owned by exactly one writer."""

    def set(self, value: T) -> bool:
        """Publish ``value``.

        Returns:
            False if ``value`` equals the current value (nothing published).
        """
        if value == self._value:
            return False
        self._value = value
        for queue in self._subscribers:
            _offer_latest(queue, value)
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logger.error(
                    "state_listener_failed",
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return True

    def as_read_only(self) -> ReadOnlyState[T]:
        return _StateView(self)


class _StateView(ReadOnlyState[T]):
    """Read-only proxy over a MutableState; has no ``set``."""

    def __init__(self, source: MutableState[T]) -> None:
        self._source = source

    @property
    def value(self) -> T:
        return self._source.value

    @property
    def subscriber_count(self) -> int:
        return self._source.subscriber_count

    def subscribe(self) -> AsyncIterator[T]:
        return self._source.subscribe()

    def add_listener(self, listener: Callable[[T], None]) -> Callable[[], None]:
        return self._source.add_listener(listener)


def derived_state(
    sources: List[ReadOnlyState], compute: Callable[[], R]
) -> ReadOnlyState[R]:
    """State recomputed from ``compute()`` whenever any source changes."""
    state: MutableState[R] = MutableState(compute())
    for source in sources:
        source.add_listener(lambda _value: state.set(compute()))
    return state.as_read_only()
