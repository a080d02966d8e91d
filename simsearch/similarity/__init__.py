"""Similarity scoring module."""

from simsearch.similarity.engine import SimilarityEngine, matches_query
from simsearch.similarity.models import FeatureWeights, SearchMode, SearchResult

__all__ = [
    "FeatureWeights",
    "SearchMode",
    "SearchResult",
    "SimilarityEngine",
    "matches_query",
]
