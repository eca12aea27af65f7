"""Translation history models."""

from datetime import datetime, timezone
from typing import Dict, Iterable

from pydantic import Field

from infrastructure.models import DocumentModel


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TranslationRecord(DocumentModel):
    """One saved translation, stored at ``users/{uid}/history/{id}``."""

    id: str = ""
    user_id: str = ""
    source_text: str = ""
    target_text: str = ""
    source_lang: str = ""
    target_lang: str = ""
    timestamp: datetime = Field(default_factory=_utc_now)
    mode: str = ""
    session_id: str = ""

    def involves_language(self, language_code: str) -> bool:
        return language_code in (self.source_lang, self.target_lang)

    @property
    def languages(self) -> set[str]:
        """Non-blank source and target language codes."""
        return {lang.strip() for lang in (self.source_lang, self.target_lang) if lang.strip()}


def count_languages(records: Iterable[TranslationRecord]) -> Dict[str, int]:
    """Number of records each language code appears in.

    A record counts once per distinct language, so ``en -> en`` adds one to
    ``en``.
    """
    counts: Dict[str, int] = {}
    for record in records:
        for lang in record.languages:
            counts[lang] = counts.get(lang, 0) + 1
    return counts
