"""Operation status enumeration.

Status codes used to classify the outcome of remote calls (document reads
and writes, callable functions) so callers can decide whether to retry.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Retryable (network loss, timeout, unavailable, quota)
        PERMANENT_ERROR: Not retryable (invalid argument, malformed request)
        UNAUTHORIZED: Authentication or permission failure
        NOT_FOUND: Document or function does not exist
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
