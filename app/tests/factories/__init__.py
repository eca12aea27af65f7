"""Test data factories for deterministic test data generation."""

from tests.factories.documents import (
    BASE_TIME,
    make_friend_document,
    make_history_document,
    make_request_document,
    make_shared_item_document,
    seed_history,
)

__all__ = [
    "BASE_TIME",
    "make_friend_document",
    "make_history_document",
    "make_request_document",
    "make_shared_item_document",
    "seed_history",
]
