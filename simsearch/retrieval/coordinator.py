"""Search orchestration: embed, select candidates, score, summarize."""

import time
from collections.abc import Iterable, Mapping
from typing import Any

from simsearch.config import SearchSettings, get_settings
from simsearch.documents.models import Document
from simsearch.embeddings.service import EmbeddingService
from simsearch.exceptions import (
    EmbeddingUnavailableError,
    InvalidArgumentError,
    SimSearchError,
)
from simsearch.logging_config import get_logger
from simsearch.observability.metrics import track_search
from simsearch.retrieval.models import (
    RankDifference,
    ScoringComparison,
    SearchOptions,
    SearchResultSet,
    SearchStats,
    StrategyComparison,
)
from simsearch.similarity.engine import SimilarityEngine
from simsearch.similarity.models import SearchMode, SearchResult
from simsearch.store.document_store import DocumentStore
from simsearch.vectors.ops import Vector, is_finite

logger = get_logger(__name__)


class RetrievalCoordinator:
    """Runs searches against one document store.

    A search never mutates the store. The embedding call completes before
    the store's read lock is taken; candidate selection and scoring then
    run under that lock.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        store: DocumentStore,
        engine: SimilarityEngine | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            embedding_service: Collaborator that embeds query text.
            store: Documents to search.
            engine: Scoring engine.
            settings: Defaults for unset top_k and threshold.
        """
        self._embedding_service = embedding_service
        self._store = store
        self._engine = engine or SimilarityEngine()
        self._settings = settings or get_settings().search

    @property
    def store(self) -> DocumentStore:
        """The store being searched."""
        return self._store

    async def search(
        self,
        query_text: str,
        options: SearchOptions | None = None,
    ) -> SearchResultSet:
        """Embed the query and return ranked results with stats.

        Args:
            query_text: Non-empty query.
            options: Mode, limits, filters and boosts.

        Returns:
            Results plus count and average score.

        Raises:
            InvalidArgumentError: For empty query text, non-positive top_k
                or malformed filters; raised before any embedding.
            EmbeddingUnavailableError: If no usable query vector came back.
            DimensionMismatchError: If a stored vector disagrees with the
                query vector.
        """
        options = options or SearchOptions()
        self._validate(query_text, options)

        start_time = time.perf_counter()
        try:
            query_vector = await self._embed(query_text)
            result_set = self._rank(query_text, query_vector, options)
        except SimSearchError:
            track_search(options.mode.value, time.perf_counter() - start_time, 0, None, success=False)
            raise

        duration = time.perf_counter() - start_time
        top_score = result_set.results[0].score if result_set.results else None
        track_search(options.mode.value, duration, result_set.stats.retrieved, top_score)

        logger.debug(
            f"Search returned {result_set.stats.retrieved} results",
            extra={
                "mode": options.mode.value,
                "query_length": len(query_text),
                "retrieved": result_set.stats.retrieved,
                "average_score": result_set.stats.average_score,
                "duration": duration,
            },
        )
        return result_set

    async def compare_strategies(
        self,
        query_text: str,
        *,
        filters: Mapping[str, list[Any]],
        metadata_boost: Mapping[str, float],
        top_k: int = 5,
    ) -> StrategyComparison:
        """Run similarity, hybrid and filtered scoring over one query embedding.

        Args:
            query_text: Non-empty query.
            filters: Filters for the filtered strategy.
            metadata_boost: Boosts for the hybrid strategy.
            top_k: Maximum results per strategy.

        Returns:
            The three result sets and the similarity/hybrid id overlap.
        """
        strategies = {
            SearchMode.SIMILARITY: SearchOptions(mode=SearchMode.SIMILARITY, top_k=top_k),
            SearchMode.HYBRID: SearchOptions(
                mode=SearchMode.HYBRID,
                top_k=top_k,
                metadata_boost=dict(metadata_boost),
            ),
            SearchMode.FILTERED: SearchOptions(
                mode=SearchMode.FILTERED,
                top_k=top_k,
                filters=dict(filters),
            ),
        }
        for options in strategies.values():
            self._validate(query_text, options)

        query_vector = await self._embed(query_text)
        result_sets = {
            mode: self._rank(query_text, query_vector, options)
            for mode, options in strategies.items()
        }

        similarity_ids = {r.id for r in result_sets[SearchMode.SIMILARITY].results}
        hybrid_ids = {r.id for r in result_sets[SearchMode.HYBRID].results}

        return StrategyComparison(
            similarity=result_sets[SearchMode.SIMILARITY],
            hybrid=result_sets[SearchMode.HYBRID],
            filtered=result_sets[SearchMode.FILTERED],
            overlap=len(similarity_ids & hybrid_ids),
        )

    async def compare_dot_product_vs_cosine(
        self,
        query_text: str,
        *,
        top_k: int = 5,
        threshold: float | None = None,
    ) -> ScoringComparison:
        """Rank by normalized dot product and by cosine over one query embedding.

        Both rankings share the threshold (the settings default when
        unset) and top_k.

        Returns:
            Both result sets, whether their first results agree, and the
            cosine rank of every dot product result.
        """
        dot_options = SearchOptions(
            mode=SearchMode.DOT_PRODUCT,
            top_k=top_k,
            threshold=threshold,
            normalize_vectors=True,
        )
        cosine_options = SearchOptions(mode=SearchMode.SIMILARITY, top_k=top_k, threshold=threshold)
        self._validate(query_text, dot_options)

        query_vector = await self._embed(query_text)
        dot_set = self._rank(query_text, query_vector, dot_options)
        cosine_set = self._rank(query_text, query_vector, cosine_options)

        cosine_ranks = {r.id: rank for rank, r in enumerate(cosine_set.results, start=1)}
        differences = []
        for rank, result in enumerate(dot_set.results, start=1):
            cosine_rank = cosine_ranks.get(result.id)
            differences.append(
                RankDifference(
                    id=result.id,
                    dot_product_rank=rank,
                    cosine_rank=cosine_rank,
                    rank_difference=abs(rank - cosine_rank) if cosine_rank is not None else None,
                )
            )

        top_match = bool(dot_set.results) and bool(cosine_set.results) and (
            dot_set.results[0].id == cosine_set.results[0].id
        )
        return ScoringComparison(
            dot_product=dot_set,
            cosine=cosine_set,
            top_result_match=top_match,
            ranking_differences=differences,
        )

    def _validate(self, query_text: str, options: SearchOptions) -> None:
        if not query_text or not query_text.strip():
            raise InvalidArgumentError("Query text must not be empty")
        top_k = self._top_k(options)
        if top_k <= 0:
            raise InvalidArgumentError(
                f"top_k must be positive, got {top_k}",
                details={"top_k": top_k},
            )
        if options.filters:
            self._store.index.validate_filters(options.filters)

    async def _embed(self, query_text: str) -> Vector:
        try:
            result = await self._embedding_service.embed(query_text)
        except EmbeddingUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Query embedding failed: {e}")
            raise EmbeddingUnavailableError(
                f"Failed to embed query: {e}",
                details={"query_length": len(query_text), "error": str(e)},
            ) from e

        if not result.embedding:
            logger.error("Embedding service returned an empty vector")
            raise EmbeddingUnavailableError(details={"query_length": len(query_text)})
        if not is_finite(result.embedding):
            logger.error("Embedding service returned a non-finite vector")
            raise EmbeddingUnavailableError(
                "Query embedding contains NaN or infinite values",
                details={"query_length": len(query_text)},
            )
        return result.embedding

    def _rank(
        self,
        query_text: str,
        query_vector: Vector,
        options: SearchOptions,
    ) -> SearchResultSet:
        with self._store.read_locked():
            results = self._engine.rank(
                query_vector,
                self._candidates(options.filters),
                mode=options.mode,
                top_k=self._top_k(options),
                threshold=self._threshold(options),
                query_text=query_text,
                metadata_boost=options.metadata_boost,
                feature_weights=options.feature_weights,
                normalize_vectors=options.normalize_vectors,
            )

        return SearchResultSet(
            query=query_text,
            mode=options.mode,
            results=results,
            stats=self._stats(results),
        )

    def _candidates(self, filters: Mapping[str, list[Any]] | None) -> Iterable[Document]:
        if not filters:
            return self._store.all()
        ids = self._store.index.ids_matching_filters(filters)
        return self._store.iter_ids(ids)

    def _top_k(self, options: SearchOptions) -> int:
        return options.top_k if options.top_k is not None else self._settings.default_top_k

    def _threshold(self, options: SearchOptions) -> float:
        if options.threshold is not None:
            return options.threshold
        return self._settings.default_threshold

    @staticmethod
    def _stats(results: list[SearchResult]) -> SearchStats:
        average = sum(r.score for r in results) / len(results) if results else 0.0
        return SearchStats(retrieved=len(results), average_score=average)
