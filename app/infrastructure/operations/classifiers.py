"""Error classifiers for remote call failures.

Two views of the same question, "is this failure worth retrying?":

- is_retryable_error(): inspects the failure text only. Used as the
  predicate for the retry executor around any remote call, including
  callable functions whose errors only carry a status string.
- classify_remote_error(): maps google-cloud exceptions raised by the
  document database SDK to an OperationResult, falling back to the text
  classifier for anything else.

Usage:
    from infrastructure.operations.classifiers import is_retryable_error
    from infrastructure.resilience.retry import with_retry

    records = await with_retry(fetch, should_retry=is_retryable_error)
"""

from google.api_core import exceptions as gcp_exceptions

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

RETRYABLE_NETWORK_MARKERS = ("network", "timeout", "connection", "unavailable")
AUTH_MARKERS = ("unauthenticated", "permission", "unauthorized")
INVALID_ARGUMENT_MARKERS = ("invalid-argument", "invalid argument")
RETRYABLE_SERVER_MARKERS = ("internal", "deadline", "resource-exhausted")

# Seconds to wait when the server reports quota exhaustion
QUOTA_RETRY_AFTER = 60


def is_retryable_error(exc: BaseException) -> bool:
    """Decide from the failure text whether a remote call may be retried.

    Markers are checked in order and the first group that matches wins:
    network/timeout/connection/unavailable -> retry; authentication or
    permission -> stop; invalid argument -> stop; internal/deadline/
    resource-exhausted -> retry. Unmatched failures are retried.

    Args:
        exc: The exception raised by the remote call

    Returns:
        True if the call should be attempted again
    """
    message = str(exc).lower()

    if any(marker in message for marker in RETRYABLE_NETWORK_MARKERS):
        return True
    if any(marker in message for marker in AUTH_MARKERS):
        return False
    if any(marker in message for marker in INVALID_ARGUMENT_MARKERS):
        return False
    if any(marker in message for marker in RETRYABLE_SERVER_MARKERS):
        return True
    return True


def classify_remote_error(exc: BaseException) -> OperationResult:
    """Classify a document database or callable failure into OperationResult.

    Mapping for google-cloud exceptions:
    - ServiceUnavailable, DeadlineExceeded, InternalServerError, Aborted
      -> TRANSIENT_ERROR
    - ResourceExhausted -> TRANSIENT_ERROR (RATE_LIMITED, retry_after)
    - Unauthenticated, PermissionDenied -> UNAUTHORIZED
    - NotFound -> NOT_FOUND
    - InvalidArgument, FailedPrecondition, other 4xx -> PERMANENT_ERROR

    Anything else is classified with is_retryable_error().

    Args:
        exc: Exception raised by the remote call

    Returns:
        OperationResult with status, message and error_code
    """
    if isinstance(exc, gcp_exceptions.ResourceExhausted):
        return OperationResult.transient_error(
            f"Quota exhausted: {exc}",
            error_code="RATE_LIMITED",
            retry_after=QUOTA_RETRY_AFTER,
        )

    if isinstance(
        exc,
        (
            gcp_exceptions.ServiceUnavailable,
            gcp_exceptions.DeadlineExceeded,
            gcp_exceptions.InternalServerError,
            gcp_exceptions.Aborted,
        ),
    ):
        return OperationResult.transient_error(
            f"Remote service error: {exc}",
            error_code="SERVER_ERROR",
        )

    if isinstance(
        exc, (gcp_exceptions.Unauthenticated, gcp_exceptions.PermissionDenied)
    ):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"Remote access denied: {exc}",
            error_code="FORBIDDEN",
        )

    if isinstance(exc, gcp_exceptions.NotFound):
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            f"Remote resource not found: {exc}",
            error_code="NOT_FOUND",
        )

    if isinstance(exc, gcp_exceptions.ClientError):
        return OperationResult.permanent_error(
            f"Remote request rejected: {exc}",
            error_code="INVALID_REQUEST",
        )

    if is_retryable_error(exc):
        return OperationResult.transient_error(
            f"Remote call failed: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    return OperationResult.permanent_error(
        f"Remote call rejected: {type(exc).__name__}: {exc}",
        error_code="REJECTED",
    )
