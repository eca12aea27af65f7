"""Infrastructure configuration module - public API.

This module provides centralized configuration management using Pydantic
BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    RetrySettings: Retry executor settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    view_limit = settings.history.VIEW_LIMIT
    max_attempts = settings.retry.max_attempts
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.infrastructure.retry import RetrySettings

__all__ = ["Settings", "settings", "RetrySettings"]
