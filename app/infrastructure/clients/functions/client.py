"""HTTP client for callable cloud functions.

Callable functions speak a small JSON protocol over POST:

    request:  {"data": <payload>}
    success:  {"result": <payload>}
    failure:  {"error": {"status": "INVALID_ARGUMENT", "message": "..."}}

Failures are raised as CallableFunctionError whose text starts with the
lower-case error code (e.g. ``"unavailable: ..."``) so the text-based
retry classifier can decide on them.

Usage:
    from infrastructure.clients.functions import CallableFunctionClient

    client = CallableFunctionClient(base_url="https://region-project.cloudfunctions.net")
    result = await client.call_with_retry("translateText", {"text": "hola"})
"""

import asyncio
import json
from typing import Any, Callable, Dict, Optional

import requests
import structlog

from infrastructure.operations.classifiers import is_retryable_error
from infrastructure.resilience.retry import RetryExecutor

logger = structlog.get_logger()

# HTTP status -> callable error code
HTTP_STATUS_CODES = {
    400: "invalid-argument",
    401: "unauthenticated",
    403: "permission-denied",
    404: "not-found",
    409: "aborted",
    429: "resource-exhausted",
    500: "internal",
    501: "unimplemented",
    503: "unavailable",
    504: "deadline-exceeded",
}


class CallableFunctionError(Exception):
    """Classified failure of a callable function.

    Attributes:
        code: Lower-case, hyphenated error code (e.g. "permission-denied")
        message: Server or transport message
        details: Optional structured details from the server
    """

    def __init__(self, code: str, message: str, details: Any = None) -> None:
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f"{code}: {message}")


def _normalize_status(status: str) -> str:
    return status.strip().lower().replace("_", "-")


class CallableFunctionClient:
    """Client for callable functions.

    Attributes:
        base_url: Base URL of the functions (no trailing slash needed)
        timeout: Per-request timeout in seconds
        token_provider: Optional callable returning a bearer token
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        retry_executor: Optional[RetryExecutor] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_provider = token_provider
        self._retry = retry_executor or RetryExecutor(should_retry=is_retryable_error)
        self._session = session or requests.Session()
        self._session.headers.update(
            {"Content-Type": "application/json", "Accept": "application/json"}
        )
        self._logger = logger.bind(component="callable_function_client")

    async def call(self, name: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Invoke function ``name`` once.

        Returns:
            The ``result`` member of the response

        Raises:
            CallableFunctionError: On transport failure or a function error
        """
        return await asyncio.to_thread(self._post, name, payload or {})

    async def call_with_retry(
        self, name: str, payload: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Invoke function ``name``, retrying transient failures."""
        return await self._retry.run(
            lambda: self.call(name, payload),
            operation_name=f"function:{name}",
            should_retry=is_retryable_error,
        )

    def _post(self, name: str, payload: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/{name}"
        log = self._logger.bind(function=name)
        headers = {}
        if self.token_provider is not None:
            token = self.token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        log.debug("function_call_started")
        try:
            response = self._session.post(
                url, json={"data": payload}, headers=headers, timeout=self.timeout
            )
        except requests.Timeout as e:
            log.warning("function_call_timeout", timeout=self.timeout)
            raise CallableFunctionError(
                "deadline-exceeded", f"timeout after {self.timeout}s"
            ) from e
        except requests.ConnectionError as e:
            log.warning("function_call_connection_error", error=str(e))
            raise CallableFunctionError("unavailable", f"network error: {e}") from e

        body: Optional[Dict[str, Any]] = None
        if response.content:
            try:
                body = response.json()
            except json.JSONDecodeError:
                log.warning("non_json_response", content=response.text[:200])

        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error = body["error"]
            code = _normalize_status(str(error.get("status", "internal")))
            message = str(error.get("message", "")) or response.reason or code
            log.warning("function_call_failed", code=code, status_code=response.status_code)
            raise CallableFunctionError(code, message, error.get("details"))

        if not 200 <= response.status_code < 300:
            code = HTTP_STATUS_CODES.get(
                response.status_code,
                "internal" if response.status_code >= 500 else "unknown",
            )
            log.warning("function_call_failed", code=code, status_code=response.status_code)
            raise CallableFunctionError(code, response.text[:200] or f"HTTP {response.status_code}")

        if not isinstance(body, dict) or "result" not in body:
            log.error("function_call_malformed_response")
            raise CallableFunctionError("internal", "response is missing 'result'")

        log.debug("function_call_succeeded")
        return body["result"]

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()
