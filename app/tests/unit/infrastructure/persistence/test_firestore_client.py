"""Unit tests for the Firestore collection client with a mocked SDK."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore

from infrastructure.configuration.integrations import FirestoreSettings
from infrastructure.persistence import RemoteQuery, WriteOperation
from infrastructure.persistence.firestore import FirestoreCollectionClient
from infrastructure.subscriptions import DataSourceState
from modules.user_settings import SharedSettingsDataSource


def _doc(doc_id, data, exists=True):
    doc = MagicMock()
    doc.id = doc_id
    doc.exists = exists
    doc.to_dict.return_value = data
    return doc


def _chainable_query():
    query = MagicMock()
    query.where.return_value = query
    query.order_by.return_value = query
    query.start_after.return_value = query
    query.limit.return_value = query
    return query


@pytest.fixture
def sync_client():
    return MagicMock()


@pytest.fixture
def async_client():
    return MagicMock()


@pytest.fixture
def client(sync_client, async_client):
    return FirestoreCollectionClient(
        FirestoreSettings(FIRESTORE_PROJECT_ID="demo"),
        client=sync_client,
        async_client=async_client,
    )


@pytest.fixture
def polling_client(sync_client, async_client):
    """Client whose listener liveness checks run every 10ms."""
    return FirestoreCollectionClient(
        FirestoreSettings(
            FIRESTORE_PROJECT_ID="demo", FIRESTORE_WATCH_POLL_INTERVAL=0.01
        ),
        client=sync_client,
        async_client=async_client,
    )


async def _wait_until(predicate, timeout=1.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        assert loop.time() < deadline, "condition not reached in time"
        await asyncio.sleep(0.005)


class TestQueryBuilding:
    def test_collection_query_applies_every_clause(self, client, sync_client):
        query = _chainable_query()
        sync_client.collection.return_value = query
        remote = (
            RemoteQuery("friend_requests")
            .where("toUserId", "==", "u1")
            .ordered("createdAt", descending=True)
            .after(10)
            .limited(5)
        )

        built = client._build(sync_client, remote)

        assert built is query
        sync_client.collection.assert_called_once_with("friend_requests")
        assert query.where.call_count == 1
        query.order_by.assert_called_once_with(
            "createdAt", direction=firestore.Query.DESCENDING
        )
        query.start_after.assert_called_once_with({"createdAt": 10})
        query.limit.assert_called_once_with(5)

    def test_document_query_uses_document_reference(self, client, sync_client):
        client._build(sync_client, RemoteQuery("users/u1/profile/settings"))

        sync_client.document.assert_called_once_with("users/u1/profile/settings")
        sync_client.collection.assert_not_called()


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_snapshot_callback_feeds_subscription(self, client, sync_client):
        query = _chainable_query()
        sync_client.collection.return_value = query
        watch = MagicMock()
        query.on_snapshot.return_value = watch

        subscription = client.subscribe(RemoteQuery("users/u1/history").limited(50))
        callback = query.on_snapshot.call_args.args[0]
        callback([_doc("r1", {"sourceText": "hi"})], [], None)
        snapshot = await subscription.__anext__()

        assert snapshot.documents == ({"sourceText": "hi", "id": "r1"},)

        subscription.close()
        watch.unsubscribe.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_document_gives_empty_snapshot(self, client, sync_client):
        ref = MagicMock()
        sync_client.document.return_value = ref

        subscription = client.subscribe(RemoteQuery("users/u1/profile/settings"))
        callback = ref.on_snapshot.call_args.args[0]
        callback([_doc("settings", None, exists=False)], [], None)
        snapshot = await subscription.__anext__()

        assert snapshot.is_empty
        subscription.close()

    @pytest.mark.asyncio
    async def test_stopped_watch_fails_subscription(self, polling_client, sync_client):
        query = _chainable_query()
        sync_client.collection.return_value = query
        watch = MagicMock()
        watch.is_active = True
        query.on_snapshot.return_value = watch

        subscription = polling_client.subscribe(RemoteQuery("users/u1/history"))
        callback = query.on_snapshot.call_args.args[0]
        callback([_doc("r1", {"sourceText": "hi"})], [], None)
        first = await asyncio.wait_for(subscription.__anext__(), timeout=1)
        watch.is_active = False

        with pytest.raises(
            gcp_exceptions.ServiceUnavailable, match="listener for users/u1/history stopped"
        ):
            await asyncio.wait_for(subscription.__anext__(), timeout=1)

        assert first.documents[0]["id"] == "r1"
        assert subscription.closed
        watch.unsubscribe.assert_called_once()

    @pytest.mark.asyncio
    async def test_closed_subscription_ignores_watch_shutdown(
        self, polling_client, sync_client
    ):
        query = _chainable_query()
        sync_client.collection.return_value = query
        watch = MagicMock()
        watch.is_active = True
        query.on_snapshot.return_value = watch

        subscription = polling_client.subscribe(RemoteQuery("users/u1/history"))
        subscription.close()
        watch.is_active = False
        await asyncio.sleep(0.05)

        with pytest.raises(StopAsyncIteration):
            await subscription.__anext__()
        watch.unsubscribe.assert_called_once()


class TestStoppedWatchInDataSource:
    @pytest.mark.asyncio
    async def test_error_is_published_and_restart_resubscribes(
        self, polling_client, sync_client, fast_retry
    ):
        ref = MagicMock()
        sync_client.document.return_value = ref
        dead = MagicMock()
        dead.is_active = True
        ref.on_snapshot.side_effect = [dead, MagicMock()]
        source = SharedSettingsDataSource(polling_client, retry=fast_retry)

        assert source.start_observing("u1") is True
        callback = ref.on_snapshot.call_args.args[0]
        callback([_doc("settings", {"historyViewLimit": 30})], [], None)
        await _wait_until(lambda: source.state.value == DataSourceState.ACTIVE)

        dead.is_active = False
        await _wait_until(
            lambda: source.state.value == DataSourceState.ACTIVE_WITH_ERROR
        )

        assert "unavailable" in source.error.value
        assert source.observe().value.history_view_limit == 30
        assert source.handle.is_active is False

        assert source.start_observing("u1") is True
        assert ref.on_snapshot.call_count == 2
        source.stop_observing()


class TestGetOnce:
    @pytest.mark.asyncio
    async def test_document_read(self, client, async_client):
        ref = MagicMock()
        ref.get = AsyncMock(return_value=_doc("settings", {"themeMode": "dark"}))
        async_client.document.return_value = ref

        snapshot = await client.get_once(RemoteQuery("users/u1/profile/settings"))

        assert snapshot.documents == ({"themeMode": "dark", "id": "settings"},)

    @pytest.mark.asyncio
    async def test_collection_read_streams_documents(self, client, async_client):
        query = _chainable_query()
        async_client.collection.return_value = query

        async def _stream():
            for doc in [_doc("r2", {"timestamp": 2}), _doc("r1", {"timestamp": 1})]:
                yield doc

        query.stream.side_effect = _stream

        snapshot = await client.get_once(RemoteQuery("users/u1/history"))

        assert [doc["id"] for doc in snapshot.documents] == ["r2", "r1"]


class TestBatchWrite:
    @pytest.mark.asyncio
    async def test_commits_one_batch_per_chunk(self, client, async_client):
        batches = []

        def _new_batch():
            batch = MagicMock()
            batch.commit = AsyncMock()
            batches.append(batch)
            return batch

        async_client.batch.side_effect = _new_batch
        operations = [
            WriteOperation.set("users/u1/history/r1", {"timestamp": 1}),
            WriteOperation.update("users/u1/history/r2", {"mode": "text"}),
            WriteOperation.delete("users/u1/history/r3"),
        ]

        result = await client.batch_write(operations, max_batch_size=2)

        assert result.data == {"operations": 3, "batches": 2}
        assert len(batches) == 2
        batches[0].set.assert_called_once()
        batches[0].update.assert_called_once()
        batches[1].delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_commit_failure_propagates(self, client, async_client):
        batch = MagicMock()
        batch.commit = AsyncMock(side_effect=gcp_exceptions.ServiceUnavailable("down"))
        async_client.batch.return_value = batch

        with pytest.raises(gcp_exceptions.ServiceUnavailable):
            await client.batch_write([WriteOperation.set("items/a", {"n": 1})])
