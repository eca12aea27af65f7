"""Retry executor configuration.

This module defines the backoff policy for retrying a remote call.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.configuration import RetrySettings


@dataclass(frozen=True)
class BackoffConfig:
    """Backoff policy for a single retried call.

    Attributes:
        max_attempts: Total attempts, including the first call
        initial_delay: Seconds to wait before the first retry
        max_delay: Ceiling for any single delay (seconds)
        factor: Growth factor applied after every failed attempt

    Example:
        config = BackoffConfig()  # 3 attempts, 0.5s -> 5s, factor 2

        config = BackoffConfig(max_attempts=5, initial_delay=1.0)
    """

    max_attempts: int = 3
    initial_delay: float = 0.5
    max_delay: float = 5.0
    factor: float = 2.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay <= 0:
            raise ValueError("initial_delay must be greater than 0")
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be >= initial_delay")
        if self.factor <= 1:
            raise ValueError("factor must be greater than 1")

    @classmethod
    def from_settings(cls, retry_settings: "RetrySettings") -> "BackoffConfig":
        """Build the policy from environment-driven settings."""
        return cls(
            max_attempts=retry_settings.max_attempts,
            initial_delay=retry_settings.initial_delay_seconds,
            max_delay=retry_settings.max_delay_seconds,
            factor=retry_settings.backoff_factor,
        )
