"""Base Pydantic model configuration for remote documents.

Remote documents use camelCase field names (``sourceText``,
``createdAt``); Python code uses snake_case. DocumentModel accepts both
and writes camelCase back.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

logger = structlog.get_logger()


class DocumentModel(BaseModel):
    """Base model for records stored in the remote document database.

    Provides standard Pydantic configuration for:
    - camelCase aliases with populate_by_name
    - Ignoring unknown document fields
    - Type coercion
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # Accept both field name and alias
        extra="ignore",  # Documents may carry fields this client does not use
        use_enum_values=False,  # Keep enums as enum objects, not values
        str_strip_whitespace=False,  # Translated text is stored verbatim
    )

    # Field filled from the snapshot ``id`` key when the document lacks it
    document_id_field: ClassVar[Optional[str]] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]):
        """Build the model from a snapshot document (with its ``id`` key)."""
        data = dict(document)
        id_field = cls.document_id_field
        if id_field and "id" in data:
            alias = cls.model_fields[id_field].alias or id_field
            if not data.get(alias) and not data.get(id_field):
                data[alias] = data["id"]
        return cls.model_validate(data)

    def to_document(self) -> Dict[str, Any]:
        """Serialize for writing: camelCase keys, without the ``id``.

        Datetimes are kept as datetimes (stored as native timestamps); enums
        are written as their values.
        """
        data = self.model_dump(by_alias=True, exclude={"id"})
        return {
            key: value.value if isinstance(value, Enum) else value
            for key, value in data.items()
        }


M = TypeVar("M", bound=DocumentModel)


def parse_documents(
    model: Type[M], documents: Iterable[Dict[str, Any]]
) -> List[M]:
    """Parse snapshot documents into ``model``, skipping malformed ones."""
    items = []
    for document in documents:
        try:
            items.append(model.from_document(document))
        except ValidationError as e:
            logger.warning(
                "document_skipped",
                model=model.__name__,
                document_id=document.get("id"),
                error=str(e),
            )
    return items
