"""User settings model, stored at ``users/{uid}/profile/settings``."""

from typing import Dict, List

from pydantic import Field

from infrastructure.models import DocumentModel

BASE_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 100


class UserSettings(DocumentModel):
    """Per-user preferences. Missing fields fall back to these defaults."""

    primary_language_code: str = "en-US"
    font_size_scale: float = 1.0
    theme_mode: str = "system"  # system | light | dark
    color_palette_id: str = "default"
    unlocked_palettes: List[str] = Field(default_factory=lambda: ["default"])
    voice_settings: Dict[str, str] = Field(default_factory=dict)  # language -> voice
    history_view_limit: int = BASE_HISTORY_LIMIT
    auto_theme_enabled: bool = False
    notify_new_messages: bool = True
    notify_friend_requests: bool = True
    notify_request_accepted: bool = True
    notify_shared_inbox: bool = True
