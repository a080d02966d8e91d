"""Retrieval data models."""

from typing import Any

from pydantic import BaseModel, Field, FiniteFloat

from simsearch.similarity.models import FeatureWeights, SearchMode, SearchResult


class SearchOptions(BaseModel):
    """Options for a coordinated search.

    Unset top_k and threshold fall back to SearchSettings defaults.

    Attributes:
        mode: Scoring mode.
        top_k: Maximum results; must be positive.
        threshold: Minimum score for similarity, filtered and dot_product.
        filters: Field -> acceptable values (OR within, AND across fields).
        metadata_boost: Hybrid mode field -> additive weight.
        feature_weights: Weighted mode sub-field weights.
        normalize_vectors: Normalize vectors before a dot product.
    """

    mode: SearchMode = Field(default=SearchMode.SIMILARITY, description="Scoring mode")
    top_k: int | None = Field(default=None, description="Maximum results")
    threshold: FiniteFloat | None = Field(default=None, description="Minimum score")
    filters: dict[str, list[Any]] | None = Field(
        default=None,
        description="Metadata filters",
    )
    metadata_boost: dict[str, FiniteFloat] = Field(
        default_factory=dict,
        description="Hybrid boosts per metadata field",
    )
    feature_weights: FeatureWeights = Field(
        default_factory=FeatureWeights,
        description="Weighted mode feature weights",
    )
    normalize_vectors: bool = Field(
        default=False,
        description="Normalize vectors in dot product mode",
    )


class SearchStats(BaseModel):
    """Statistics over the returned results.

    Attributes:
        retrieved: Number of results returned.
        average_score: Mean score of the returned results, 0 when empty.
    """

    retrieved: int = Field(description="Results returned")
    average_score: float = Field(description="Mean score of returned results")


class SearchResultSet(BaseModel):
    """Complete outcome of one search."""

    query: str = Field(description="Query text")
    mode: SearchMode = Field(description="Scoring mode")
    results: list[SearchResult] = Field(default_factory=list)
    stats: SearchStats = Field(description="Result statistics")


class StrategyComparison(BaseModel):
    """Side-by-side results of the similarity, hybrid and filtered strategies.

    Attributes:
        similarity: Plain cosine results.
        hybrid: Cosine plus metadata boosts.
        filtered: Cosine over the filtered candidate set.
        overlap: Ids returned by both similarity and hybrid.
    """

    similarity: SearchResultSet
    hybrid: SearchResultSet
    filtered: SearchResultSet
    overlap: int = Field(description="Ids shared by similarity and hybrid results")


class RankDifference(BaseModel):
    """Where one dot product result landed in the cosine ranking.

    Attributes:
        id: Document identifier.
        dot_product_rank: 1-based rank under normalized dot product.
        cosine_rank: 1-based rank under cosine, None if cosine did not
            return the document.
        rank_difference: Absolute rank distance, None when cosine_rank is.
    """

    id: str
    dot_product_rank: int
    cosine_rank: int | None = None
    rank_difference: int | None = None


class ScoringComparison(BaseModel):
    """Normalized dot product ranking next to cosine ranking for one query.

    On unit vectors the two scores coincide, so differences point at
    thresholding or vectors that could not be normalized.
    """

    dot_product: SearchResultSet
    cosine: SearchResultSet
    top_result_match: bool = Field(description="Both strategies rank the same document first")
    ranking_differences: list[RankDifference] = Field(default_factory=list)
