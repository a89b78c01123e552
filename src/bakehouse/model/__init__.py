"""Document records and document types."""

from bakehouse.model.document import (
    PUBLISHED_DATE,
    DocumentRecord,
    DocumentStatus,
    NavigationLink,
)
from bakehouse.model.document_types import BUILTIN_DOCUMENT_TYPES, DocumentTypeRegistry

__all__ = [
    "BUILTIN_DOCUMENT_TYPES",
    "PUBLISHED_DATE",
    "DocumentRecord",
    "DocumentStatus",
    "DocumentTypeRegistry",
    "NavigationLink",
]
