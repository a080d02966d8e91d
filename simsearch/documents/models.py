"""Document data models."""

from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat

# Sub-fields that can be embedded separately for weighted search.
FEATURE_FIELDS = ("title", "content", "tags", "category")

_COLLECTION_TYPES = (list, tuple, set, frozenset)


def metadata_members(value: Any) -> Iterator[Any]:
    """Yield the individual values of a metadata entry.

    Collection values (tags, seasons) yield each member; scalars yield
    themselves.
    """
    if isinstance(value, _COLLECTION_TYPES):
        yield from value
    elif value is not None:
        yield value


class NewDocument(BaseModel):
    """A document as submitted for storage.

    Attributes:
        id: Unique identifier, immutable once created.
        vector: Embedding of the document's searchable text. May be
            absent if embedding was deferred; such a document is never
            scored.
        metadata: Open mapping of field name to scalar or string set.
        field_vectors: Separately embedded sub-fields for weighted search.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Unique document identifier")
    vector: list[FiniteFloat] | None = Field(
        default=None,
        description="Document embedding",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Filterable and displayable metadata",
    )
    field_vectors: dict[str, list[FiniteFloat]] = Field(
        default_factory=dict,
        description="Per-field embeddings (title, content, tags, category)",
    )

    def to_document(self) -> "Document":
        """Build a storable Document from the submitted fields."""
        return Document(**dict(self))


class Document(NewDocument):
    """A searchable document.

    Vector components must be finite; NaN and infinity are rejected.
    `created_at` is replaced by the store when the document is inserted.
    """

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Insertion timestamp",
    )

    @property
    def has_vector(self) -> bool:
        """Whether the document can take part in similarity scoring."""
        return bool(self.vector)

    def all_vectors(self) -> Iterator[tuple[str, list[float]]]:
        """Yield (name, vector) for the main vector and every field vector."""
        if self.vector:
            yield "vector", self.vector
        for name, vector in self.field_vectors.items():
            if vector:
                yield f"field_vectors.{name}", vector
