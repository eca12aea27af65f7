"""Retry executor infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Retry executor configuration for remote calls.

    Provides the default backoff policy used by repositories wrapping flaky
    network-backed operations.

    Environment Variables:
        RETRY_MAX_ATTEMPTS: Total attempts including the first call (default: 3)
        RETRY_INITIAL_DELAY_SECONDS: Delay before the first retry (default: 0.5)
        RETRY_MAX_DELAY_SECONDS: Ceiling for any single delay (default: 5.0)
        RETRY_BACKOFF_FACTOR: Growth factor (default: 2.0)

    Exponential Backoff:
        After each failed attempt n (1-based) the delay becomes
        min(max_delay, delay * factor ^ n), so growth compounds.

        Example with defaults (initial=0.5s, max=5s, factor=2):
            Retry 1: 0.5s
            Retry 2: 1.0s
            Retry 3: 4.0s
            Retry 4: 5.0s (capped)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        attempts = settings.retry.max_attempts
        ```
    """

    max_attempts: int = Field(
        default=3,
        alias="RETRY_MAX_ATTEMPTS",
        description="Total attempts including the first call",
    )
    initial_delay_seconds: float = Field(
        default=0.5,
        alias="RETRY_INITIAL_DELAY_SECONDS",
        description="Delay before the first retry (seconds)",
    )
    max_delay_seconds: float = Field(
        default=5.0,
        alias="RETRY_MAX_DELAY_SECONDS",
        description="Maximum delay between attempts (seconds)",
    )
    backoff_factor: float = Field(
        default=2.0,
        alias="RETRY_BACKOFF_FACTOR",
        description="Multiplicative growth factor for the delay",
    )
