"""Session context binding for structured logging.

This module provides utilities for binding session-scoped context to logs,
so every entry written while a user session is being set up or torn down
carries the same correlation id and user id.

Usage:
    from infrastructure.logging import bind_session_context

    with bind_session_context(user_id="u-123"):
        logger.info("observers_started")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_session_context(
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind session-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique operation identifier. Auto-generated if not provided.
        user_id: Id of the signed-in user (if available).
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars for the block.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}

    if user_id is not None:
        context["user_id"] = user_id

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID in the current logging context.

    Args:
        correlation_id: The correlation ID to set.
    """
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_session_context() -> None:
    """Clear all session-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
