"""Remote document database settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class FirestoreSettings(IntegrationSettings):
    """Firestore connection settings.

    Environment Variables:
        FIRESTORE_PROJECT_ID: Google Cloud project hosting the database
        FIRESTORE_DATABASE: Database id (default: "(default)")
        FIRESTORE_BATCH_SIZE: Maximum operations per atomic batch (default: 500)
        FIRESTORE_EMULATOR_HOST: Optional emulator address for local runs
        FIRESTORE_WATCH_POLL_INTERVAL: Seconds between liveness checks of a
            real-time listener (default: 1.0)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        batch_size = settings.firestore.BATCH_SIZE
        ```
    """

    PROJECT_ID: str | None = Field(default=None, alias="FIRESTORE_PROJECT_ID")
    DATABASE: str = Field(default="(default)", alias="FIRESTORE_DATABASE")
    BATCH_SIZE: int = Field(default=500, alias="FIRESTORE_BATCH_SIZE")
    EMULATOR_HOST: str | None = Field(default=None, alias="FIRESTORE_EMULATOR_HOST")
    WATCH_POLL_INTERVAL: float = Field(
        default=1.0, gt=0, alias="FIRESTORE_WATCH_POLL_INTERVAL"
    )
    BACKEND: str = Field(
        default="firestore",
        alias="COLLECTION_BACKEND",
        description="Collection client backend: 'firestore' or 'memory'",
    )
