"""Retrieval coordination module."""

from simsearch.retrieval.coordinator import RetrievalCoordinator
from simsearch.retrieval.models import (
    RankDifference,
    ScoringComparison,
    SearchOptions,
    SearchResultSet,
    SearchStats,
    StrategyComparison,
)

__all__ = [
    "RankDifference",
    "RetrievalCoordinator",
    "ScoringComparison",
    "SearchOptions",
    "SearchResultSet",
    "SearchStats",
    "StrategyComparison",
]
