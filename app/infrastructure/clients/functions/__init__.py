"""Callable cloud function client."""

from infrastructure.clients.functions.client import (
    CallableFunctionClient,
    CallableFunctionError,
)

__all__ = ["CallableFunctionClient", "CallableFunctionError"]
