"""Unit tests for the callable function client."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from infrastructure.clients.functions import CallableFunctionClient, CallableFunctionError
from infrastructure.resilience.retry import BackoffConfig, RetryExecutor


def _response(status_code=200, body=None, text=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    if body is not None:
        response.text = json.dumps(body)
        response.json.return_value = body
    else:
        response.text = text or ""
        response.json.side_effect = json.JSONDecodeError("Expecting value", response.text, 0)
    response.content = response.text.encode()
    return response


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def function_client(session, recorded_sleep):
    return CallableFunctionClient(
        base_url="https://functions.example.test/",
        timeout=5.0,
        token_provider=lambda: "token-123",
        retry_executor=RetryExecutor(BackoffConfig(), sleep=recorded_sleep),
        session=session,
    )


class TestCall:
    def test_requires_base_url(self, session):
        with pytest.raises(ValueError, match="base_url is required"):
            CallableFunctionClient(base_url="", session=session)

    @pytest.mark.asyncio
    async def test_successful_call_returns_result(self, function_client, session):
        session.post.return_value = _response(body={"result": {"text": "hello"}})

        result = await function_client.call("translateText", {"text": "hola"})

        assert result == {"text": "hello"}
        session.post.assert_called_once_with(
            "https://functions.example.test/translateText",
            json={"data": {"text": "hola"}},
            headers={"Authorization": "Bearer token-123"},
            timeout=5.0,
        )

    @pytest.mark.asyncio
    async def test_error_body_is_normalized(self, function_client, session):
        session.post.return_value = _response(
            status_code=400,
            body={"error": {"status": "INVALID_ARGUMENT", "message": "text is empty"}},
            reason="Bad Request",
        )

        with pytest.raises(CallableFunctionError) as exc_info:
            await function_client.call("translateText", {"text": ""})

        assert exc_info.value.code == "invalid-argument"
        assert str(exc_info.value) == "invalid-argument: text is empty"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code,code",
        [(403, "permission-denied"), (503, "unavailable"), (502, "internal"), (418, "unknown")],
    )
    async def test_http_status_mapping(self, function_client, session, status_code, code):
        session.post.return_value = _response(status_code=status_code, text="nope")

        with pytest.raises(CallableFunctionError) as exc_info:
            await function_client.call("translateText")

        assert exc_info.value.code == code

    @pytest.mark.asyncio
    async def test_timeout_is_deadline_exceeded(self, function_client, session):
        session.post.side_effect = requests.Timeout("slow")

        with pytest.raises(CallableFunctionError, match="deadline-exceeded"):
            await function_client.call("translateText")

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self, function_client, session):
        session.post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(CallableFunctionError, match="unavailable: network error"):
            await function_client.call("translateText")

    @pytest.mark.asyncio
    async def test_missing_result_is_internal(self, function_client, session):
        session.post.return_value = _response(body={"data": 1})

        with pytest.raises(CallableFunctionError, match="internal"):
            await function_client.call("translateText")


class TestCallWithRetry:
    @pytest.mark.asyncio
    async def test_retries_transient_failures(self, function_client, session, recorded_sleep):
        session.post.side_effect = [
            requests.ConnectionError("reset"),
            _response(status_code=503, text="busy"),
            _response(body={"result": "ok"}),
        ]

        result = await function_client.call_with_retry("translateText", {"text": "hola"})

        assert result == "ok"
        assert session.post.call_count == 3
        assert recorded_sleep.delays == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_permission_denied_is_not_retried(self, function_client, session, recorded_sleep):
        session.post.return_value = _response(
            status_code=403,
            body={"error": {"status": "PERMISSION_DENIED", "message": "denied"}},
        )

        with pytest.raises(CallableFunctionError, match="permission-denied"):
            await function_client.call_with_retry("translateText")

        assert session.post.call_count == 1
        assert recorded_sleep.delays == []
