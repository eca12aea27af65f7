"""Callable cloud function settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class FunctionsSettings(IntegrationSettings):
    """Callable function endpoint settings.

    Environment Variables:
        FUNCTIONS_BASE_URL: Base URL of the callable functions
            (e.g. https://us-central1-my-project.cloudfunctions.net)
        FUNCTIONS_TIMEOUT_SECONDS: Per-request timeout (default: 30)
    """

    BASE_URL: str = Field(default="", alias="FUNCTIONS_BASE_URL")
    TIMEOUT_SECONDS: float = Field(default=30.0, alias="FUNCTIONS_TIMEOUT_SECONDS")
