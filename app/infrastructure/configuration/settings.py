"""Application configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    FirestoreSettings,
    FunctionsSettings,
)

# Feature settings
from infrastructure.configuration.features import (
    HistoryFeatureSettings,
    FriendsFeatureSettings,
)

# Infrastructure settings
from infrastructure.configuration.infrastructure import RetrySettings


class Settings(BaseSettings):
    """Application configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: Remote services (document database, callable functions)
    - **Features**: Domain modules (history, friends)
    - **Infrastructure**: Core system behavior (retry)

    Environment Variables:
        PREFIX: Environment prefix for non-production deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        view_limit = settings.history.VIEW_LIMIT
        batch_size = settings.firestore.BATCH_SIZE

        if settings.is_production:
            # Production-specific logic...
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    firestore: FirestoreSettings
    functions: FunctionsSettings

    # Feature settings
    history: HistoryFeatureSettings
    friends: FriendsFeatureSettings

    # Infrastructure settings
    retry: RetrySettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "firestore": FirestoreSettings,
            "functions": FunctionsSettings,
            # Features
            "history": HistoryFeatureSettings,
            "friends": FriendsFeatureSettings,
            # Infrastructure
            "retry": RetrySettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
