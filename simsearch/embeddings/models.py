"""Embedding data models."""

from pydantic import BaseModel, Field


class EmbeddingResult(BaseModel):
    """Result of an embedding operation.

    An empty embedding is a legal value here; the retrieval coordinator
    decides what an empty query embedding means.

    Attributes:
        text: The text that was embedded.
        embedding: The embedding vector.
        model: The model used to generate the embedding.
    """

    text: str = Field(description="Text that was embedded")
    embedding: list[float] = Field(description="Embedding vector")
    model: str = Field(description="Model used for embedding")

    @property
    def dimensions(self) -> int:
        """Number of dimensions in the embedding."""
        return len(self.embedding)


class RawDocument(BaseModel):
    """A document before embedding.

    Attributes:
        id: Unique document identifier.
        title: Short title.
        content: Body text.
        tags: Free-form tags.
        category: Primary category.
        metadata: Any further filterable fields (location, type, price,
            season, rating...).
    """

    id: str = Field(min_length=1, description="Document identifier")
    title: str = Field(default="", description="Document title")
    content: str = Field(default="", description="Document body")
    tags: list[str] = Field(default_factory=list, description="Tags")
    category: str | None = Field(default=None, description="Primary category")
    metadata: dict[str, object] = Field(
        default_factory=dict,
        description="Additional metadata",
    )

    def searchable_text(self) -> str:
        """Title, content and tags joined into one embedding input."""
        return " ".join(part for part in (self.title, self.content, " ".join(self.tags)) if part)
