"""Infrastructure models.

Exports:
    DocumentModel: Base model for camelCase remote documents
    parse_documents: Parse snapshot documents, skipping malformed ones
"""

from infrastructure.models.base import DocumentModel, parse_documents

__all__ = ["DocumentModel", "parse_documents"]
