"""Infrastructure modules for the lingosync library.

Centralized infrastructure components:
- configuration: Settings management (settings, RetrySettings)
- logging: Structured logging (configure_logging, get_module_logger)
- models: Base model for remote documents
- operations: Operation results and error classification
- persistence: Remote collection client (Firestore, in-memory)
- clients: Callable cloud function client
- resilience: Retry with exponential backoff
- subscriptions: Shared subscription data sources and observable state
- services: Process-scoped providers (get_settings, get_history_data_source, ...)
"""

# Configuration
from infrastructure.configuration import settings

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    # Configuration
    "settings",
    # Operations
    "OperationResult",
    "OperationStatus",
]
