"""Document model module."""

from simsearch.documents.models import (
    FEATURE_FIELDS,
    Document,
    NewDocument,
    metadata_members,
)

__all__ = [
    "FEATURE_FIELDS",
    "Document",
    "NewDocument",
    "metadata_members",
]
