"""Unit tests for QueueSubscription."""

import pytest

from infrastructure.persistence import QueueSubscription, RemoteQuery, Snapshot


@pytest.fixture
def subscription():
    return QueueSubscription(RemoteQuery("users/u1/history"))


class TestQueueSubscription:
    @pytest.mark.asyncio
    async def test_yields_snapshots_in_push_order(self, subscription):
        first = Snapshot(documents=({"id": "a"},))
        second = Snapshot(documents=({"id": "b"},))
        subscription.push(first)
        subscription.push(second)

        assert await subscription.__anext__() is first
        assert await subscription.__anext__() is second

    @pytest.mark.asyncio
    async def test_failure_is_raised_and_closes(self, subscription):
        subscription.fail(RuntimeError("unavailable"))

        with pytest.raises(RuntimeError, match="unavailable"):
            await subscription.__anext__()
        assert subscription.closed

        with pytest.raises(StopAsyncIteration):
            await subscription.__anext__()

    @pytest.mark.asyncio
    async def test_close_drops_queued_snapshots(self, subscription):
        subscription.push(Snapshot())
        subscription.close()

        received = [snapshot async for snapshot in subscription]

        assert received == []

    @pytest.mark.asyncio
    async def test_push_after_close_is_ignored(self, subscription):
        subscription.close()
        subscription.push(Snapshot())
        subscription.fail(RuntimeError("late"))

        assert [snapshot async for snapshot in subscription] == []

    def test_close_runs_callback_once(self):
        closed = []
        subscription = QueueSubscription(RemoteQuery("users/u1/friends"), on_close=closed.append)

        subscription.close()
        subscription.close()

        assert closed == [subscription]
