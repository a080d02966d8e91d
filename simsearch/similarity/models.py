"""Similarity scoring data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat


class SearchMode(str, Enum):
    """How candidates are scored."""

    SIMILARITY = "similarity"
    FILTERED = "filtered"
    DOT_PRODUCT = "dot_product"
    HYBRID = "hybrid"
    WEIGHTED = "weighted"

    @property
    def applies_threshold(self) -> bool:
        """Hybrid and weighted scores are only truncated, never thresholded."""
        return self not in (SearchMode.HYBRID, SearchMode.WEIGHTED)


class FeatureWeights(BaseModel):
    """Weights for the separately embedded sub-fields in weighted mode.

    They are meant to sum to 1.0 but this is not enforced.
    """

    title: FiniteFloat = Field(default=0.3, description="Title similarity weight")
    content: FiniteFloat = Field(default=0.4, description="Content similarity weight")
    tags: FiniteFloat = Field(default=0.2, description="Tags similarity weight")
    category: FiniteFloat = Field(default=0.1, description="Category similarity weight")

    def items(self) -> list[tuple[str, float]]:
        """(field, weight) pairs in a fixed order."""
        return [
            ("title", self.title),
            ("content", self.content),
            ("tags", self.tags),
            ("category", self.category),
        ]


class SearchResult(BaseModel):
    """A ranked match. Read-only once built.

    Attributes:
        id: Document identifier.
        score: Mode-dependent score; cosine lies in [-1, 1], dot product
            and hybrid scores are unbounded.
        metadata: Copy of the document metadata.
        mode: Scoring mode that produced the score.
        breakdown: Score components (boosts applied, per-field similarity).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Document identifier")
    score: float = Field(description="Ranking score")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Document metadata",
    )
    mode: SearchMode = Field(description="Scoring mode")
    breakdown: dict[str, float] = Field(
        default_factory=dict,
        description="Score components",
    )
