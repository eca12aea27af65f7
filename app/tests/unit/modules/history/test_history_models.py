"""Unit tests for translation history models."""

import pytest

from modules.history import TranslationRecord, count_languages
from tests.factories import BASE_TIME, make_history_document


@pytest.mark.unit
class TestTranslationRecord:
    def test_from_document(self):
        document = {**make_history_document(1), "id": "r1"}

        record = TranslationRecord.from_document(document)

        assert record.id == "r1"
        assert record.source_text == "source text 1"
        assert record.source_lang == "en-US"
        assert record.target_lang == "zh-HK"
        assert record.timestamp > BASE_TIME

    def test_to_document_excludes_id(self):
        record = TranslationRecord(id="r1", user_id="user1", source_text="hola")

        document = record.to_document()

        assert "id" not in document
        assert document["userId"] == "user1"
        assert document["sourceText"] == "hola"

    def test_involves_language(self):
        record = TranslationRecord(source_lang="en-US", target_lang="ja-JP")

        assert record.involves_language("en-US")
        assert record.involves_language("ja-JP")
        assert not record.involves_language("fr-FR")

    def test_languages_skip_blank_codes(self):
        record = TranslationRecord(source_lang="en-US", target_lang=" ")

        assert record.languages == {"en-US"}


@pytest.mark.unit
class TestCountLanguages:
    def test_counts_each_record_once_per_language(self):
        records = [
            TranslationRecord(source_lang="en-US", target_lang="zh-HK"),
            TranslationRecord(source_lang="en-US", target_lang="ja-JP"),
            TranslationRecord(source_lang="en-US", target_lang="en-US"),
        ]

        assert count_languages(records) == {"en-US": 3, "zh-HK": 1, "ja-JP": 1}

    def test_empty(self):
        assert count_languages([]) == {}
