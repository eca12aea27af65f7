"""Operation result types, status enums and error classifiers.

Standardized result types for remote operations and the classifiers that
decide whether a failed remote call is worth retrying.
"""

from infrastructure.operations.classifiers import (
    classify_remote_error,
    is_retryable_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_remote_error",
    "is_retryable_error",
]
