"""structlog processors wired into the pipeline by configure_logging().

Log entries routinely carry document payloads (camelCase keys, nested
``params`` and callable ``data`` dicts) and users' own translation text.
Keys are compared after normalization, so ``idToken``, ``id_token`` and
``ID-Token`` are treated alike.
"""

from typing import Any

REDACTED = "***REDACTED***"

# Normalized key fragments whose values are never written to logs
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",  # push tokens, callable id tokens, refresh tokens
        "apikey",
        "authorization",
        "credential",
        "privatekey",
        "cookie",
        "bearer",
    }
)

# Normalized keys holding user-entered or translated text
TEXT_FIELDS = frozenset(
    {
        "sourcetext",
        "targettext",
        "translatedtext",
        "text",
        "transcript",
        "recognizedtext",
    }
)


def normalize_key(key: Any) -> str:
    return str(key).lower().replace("_", "").replace("-", "")


def add_app_info(app_name: str, app_version: str = "unknown"):
    """Processor stamping every entry with the application name and git sha."""

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = app_version
        return event_dict

    return processor


def mask_sensitive_data(
    mask_value: str = REDACTED,
    additional_patterns: frozenset[str] | None = None,
):
    """Create a processor that redacts credentials, including nested ones.

    A value is replaced when its normalized key contains a sensitive
    fragment. Dicts, lists and tuples are walked, so a token inside a
    callable function payload or a subscription ``params`` dict is masked
    as well. ``None`` values are kept so missing credentials stay visible.

    Args:
        mask_value: Replacement for sensitive values.
        additional_patterns: Extra fragments, normalized like keys.

    Returns:
        A structlog processor function.
    """
    patterns = SENSITIVE_PATTERNS
    if additional_patterns:
        patterns = patterns | {normalize_key(p) for p in additional_patterns}

    def _is_sensitive(key: Any) -> bool:
        normalized = normalize_key(key)
        return any(pattern in normalized for pattern in patterns)

    def _mask(value: Any) -> Any:
        if isinstance(value, dict):
            return {
                key: mask_value
                if item is not None and _is_sensitive(key)
                else _mask(item)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return type(value)(_mask(item) for item in value)
        return value

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        return _mask(event_dict)

    return processor


def truncate_large_values(max_length: int = 500, text_preview_length: int = 64):
    """Create a processor bounding string values in an entry.

    User text fields (see TEXT_FIELDS) are cut to a short preview with
    their total length; any other string longer than ``max_length`` is cut
    at ``max_length``. Only top-level values are inspected.
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if not isinstance(value, str):
                continue
            if normalize_key(key) in TEXT_FIELDS:
                if len(value) > text_preview_length:
                    event_dict[key] = (
                        f"{value[:text_preview_length]}...[{len(value)} chars]"
                    )
            elif len(value) > max_length:
                event_dict[key] = (
                    value[:max_length] + f"...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
