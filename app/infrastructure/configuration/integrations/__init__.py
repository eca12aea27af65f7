"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.firestore import FirestoreSettings
from infrastructure.configuration.integrations.functions import FunctionsSettings

__all__ = [
    "FirestoreSettings",
    "FunctionsSettings",
]
