"""Unit tests for infrastructure.logging.formatters module.

Tests cover:
- add_app_info processor
- mask_sensitive_data processor (camelCase keys, nested payloads)
- truncate_large_values processor (user text previews)
"""

import pytest

from infrastructure.logging.formatters import (
    REDACTED,
    add_app_info,
    mask_sensitive_data,
    normalize_key,
    truncate_large_values,
)


@pytest.mark.unit
class TestAddAppInfo:
    """Test suite for add_app_info processor factory."""

    def test_adds_name_and_version(self):
        processor = add_app_info("lingosync", "1.2.3")
        event_dict = {"event": "subscription_started", "user_id": "u1"}

        result = processor(None, "info", event_dict)

        assert result["app_name"] == "lingosync"
        assert result["app_version"] == "1.2.3"
        assert result["user_id"] == "u1"

    def test_unknown_version_by_default(self):
        result = add_app_info("lingosync")(None, "info", {"event": "x"})

        assert result["app_version"] == "unknown"


@pytest.mark.unit
class TestNormalizeKey:
    @pytest.mark.parametrize("key", ["idToken", "id_token", "ID-Token"])
    def test_case_and_separators_are_ignored(self, key):
        assert normalize_key(key) == "idtoken"


@pytest.mark.unit
class TestMaskSensitiveData:
    """Test suite for mask_sensitive_data processor factory."""

    @pytest.mark.parametrize(
        "key",
        ["password", "fcm_token", "fcmToken", "idToken", "Authorization", "apiKey", "client_secret"],
    )
    def test_masks_sensitive_keys(self, key):
        result = mask_sensitive_data()(None, "info", {key: "value", "event": "x"})

        assert result[key] == REDACTED
        assert result["event"] == "x"

    def test_masks_nested_callable_payload(self):
        event_dict = {
            "event": "function_call_failed",
            "function": "registerPushToken",
            "data": {"userId": "u1", "pushToken": "abc", "devices": [{"fcmToken": "d"}]},
        }

        result = mask_sensitive_data()(None, "error", event_dict)

        assert result["data"]["userId"] == "u1"
        assert result["data"]["pushToken"] == REDACTED
        assert result["data"]["devices"] == [{"fcmToken": REDACTED}]
        assert result["function"] == "registerPushToken"

    def test_keeps_none_values(self):
        result = mask_sensitive_data()(None, "info", {"token": None})

        assert result["token"] is None

    def test_custom_mask_and_patterns(self):
        processor = mask_sensitive_data(
            mask_value="[hidden]", additional_patterns=frozenset({"e_mail"})
        )

        result = processor(None, "info", {"userEmail": "a@b.c", "user_id": "u1"})

        assert result["userEmail"] == "[hidden]"
        assert result["user_id"] == "u1"


@pytest.mark.unit
class TestTruncateLargeValues:
    """Test suite for truncate_large_values processor factory."""

    @pytest.mark.parametrize("key", ["source_text", "targetText", "transcript"])
    def test_user_text_is_cut_to_preview(self, key):
        processor = truncate_large_values(max_length=500, text_preview_length=8)

        result = processor(None, "info", {key: "b" * 20})

        assert result[key] == "b" * 8 + "...[20 chars]"

    def test_short_user_text_is_kept(self):
        processor = truncate_large_values(text_preview_length=8)

        result = processor(None, "info", {"source_text": "hola"})

        assert result["source_text"] == "hola"

    def test_truncates_other_long_strings(self):
        processor = truncate_large_values(max_length=10)

        result = processor(None, "info", {"error": "a" * 25})

        assert result["error"] == "a" * 10 + "...[truncated, 25 chars total]"

    def test_leaves_short_strings_and_other_types(self):
        processor = truncate_large_values(max_length=10)
        event_dict = {"event": "short", "count": 12345678901, "items": ["x" * 50]}

        result = processor(None, "info", dict(event_dict))

        assert result == event_dict
