"""Document store data models."""

from pydantic import BaseModel, Field


class BatchInsertFailure(BaseModel):
    """One document a batch insert could not store.

    Attributes:
        position: Index of the document in the submitted batch.
        document_id: Id of the rejected document.
        code: Error code of the rejection.
        message: Human-readable reason.
    """

    position: int = Field(description="Index in the submitted batch")
    document_id: str = Field(description="Rejected document id")
    code: str = Field(description="Error code")
    message: str = Field(description="Failure reason")


class BatchInsertResult(BaseModel):
    """Outcome of a batch insert.

    Inserts are independent: earlier successes stay stored when a later
    document fails.
    """

    inserted: list[str] = Field(
        default_factory=list,
        description="Ids stored, in submission order",
    )
    failures: list[BatchInsertFailure] = Field(
        default_factory=list,
        description="Documents that were rejected",
    )

    @property
    def ok(self) -> bool:
        """True when every document was stored."""
        return not self.failures


class StoreStats(BaseModel):
    """Summary of a document store's contents."""

    total_documents: int = Field(description="Number of stored documents")
    categories: dict[str, int] = Field(default_factory=dict)
    locations: dict[str, int] = Field(default_factory=dict)
    types: dict[str, int] = Field(default_factory=dict)
    dimension: int | None = Field(
        default=None,
        description="Vector dimension established for the store",
    )
    average_vector_dimension: float = Field(
        default=0.0,
        description="Mean length of stored vectors",
    )
    index_size: int = Field(
        default=0,
        description="Distinct (field, value) keys in the metadata index",
    )
