"""Scoring and ranking of candidate documents against a query vector."""

import math
from collections.abc import Callable, Iterable, Mapping
from copy import deepcopy
from typing import Any

from simsearch.documents.models import Document, metadata_members
from simsearch.exceptions import DimensionMismatchError, InvalidArgumentError
from simsearch.logging_config import get_logger
from simsearch.similarity.models import FeatureWeights, SearchMode, SearchResult
from simsearch.vectors.ops import Vector, cosine_similarity, dot, normalize

logger = get_logger(__name__)

# Returns (score, breakdown), or None when the document cannot be scored.
Scorer = Callable[[Document], tuple[float, dict[str, float]] | None]


def matches_query(query_text: str, value: Any) -> bool:
    """Case-insensitive substring test of the raw query against a metadata value.

    Collection values match when any string member matches. Non-string
    values never match.
    """
    needle = query_text.lower()
    return any(
        isinstance(member, str) and needle in member.lower()
        for member in metadata_members(value)
    )


class SimilarityEngine:
    """Exact linear-scan scorer.

    Every candidate is scored; thresholded modes drop scores below the
    threshold (inclusive bound); the rest are stably sorted by descending
    score, so ties keep candidate order, and cut to top_k.
    """

    def rank(
        self,
        query_vector: Vector,
        candidates: Iterable[Document],
        *,
        mode: SearchMode | str,
        top_k: int,
        threshold: float,
        query_text: str | None = None,
        metadata_boost: Mapping[str, float] | None = None,
        feature_weights: FeatureWeights | None = None,
        normalize_vectors: bool = False,
    ) -> list[SearchResult]:
        """Score, filter, sort and truncate candidates.

        Args:
            query_vector: Embedded query.
            candidates: Documents to score, in tie-break order.
            mode: Scoring mode.
            top_k: Maximum number of results; must be positive.
            threshold: Minimum score in similarity, filtered and
                dot_product modes.
            query_text: Raw query, needed for hybrid boosts.
            metadata_boost: Hybrid mode field -> weight added on a match.
            feature_weights: Weighted mode sub-field weights.
            normalize_vectors: Dot product mode normalizes both vectors first.

        Returns:
            At most top_k results, highest score first.

        Raises:
            InvalidArgumentError: If top_k is not positive, the threshold is
                not finite or hybrid boosts are given without query text.
            DimensionMismatchError: If a candidate vector's length differs
                from the query's.
        """
        if top_k <= 0:
            raise InvalidArgumentError(
                f"top_k must be positive, got {top_k}",
                details={"top_k": top_k},
            )
        if not math.isfinite(threshold):
            raise InvalidArgumentError(
                f"threshold must be finite, got {threshold}",
                details={"threshold": str(threshold)},
            )
        mode = SearchMode(mode)
        scorer = self._scorer(
            mode,
            query_vector,
            query_text=query_text,
            metadata_boost=metadata_boost or {},
            feature_weights=feature_weights or FeatureWeights(),
            normalize_vectors=normalize_vectors,
        )

        scored: list[tuple[float, Document, dict[str, float]]] = []
        considered = 0
        for doc in candidates:
            considered += 1
            try:
                outcome = scorer(doc)
            except DimensionMismatchError as e:
                logger.error(
                    f"Document {doc.id} has a vector of the wrong dimension",
                    extra={"document_id": doc.id, "expected": e.expected, "actual": e.actual},
                )
                raise DimensionMismatchError(
                    expected=e.expected,
                    actual=e.actual,
                    details={"document_id": doc.id, **e.details},
                ) from e
            if outcome is None:
                continue
            score, breakdown = outcome
            if not math.isfinite(score):
                logger.warning(
                    f"Document {doc.id} scored {score}; skipped",
                    extra={"document_id": doc.id, "mode": mode.value},
                )
                continue
            if mode.applies_threshold and score < threshold:
                continue
            scored.append((score, doc, breakdown))

        # list.sort is stable, including with reverse=True
        scored.sort(key=lambda item: item[0], reverse=True)

        logger.debug(
            f"Ranked {len(scored)} of {considered} candidates",
            extra={"mode": mode.value, "top_k": top_k, "threshold": threshold},
        )

        return [
            SearchResult(
                id=doc.id,
                score=score,
                metadata=deepcopy(doc.metadata),
                mode=mode,
                breakdown=breakdown,
            )
            for score, doc, breakdown in scored[:top_k]
        ]

    def _scorer(
        self,
        mode: SearchMode,
        query_vector: Vector,
        *,
        query_text: str | None,
        metadata_boost: Mapping[str, float],
        feature_weights: FeatureWeights,
        normalize_vectors: bool,
    ) -> Scorer:
        if mode in (SearchMode.SIMILARITY, SearchMode.FILTERED):
            return lambda doc: self._cosine(query_vector, doc)

        if mode is SearchMode.DOT_PRODUCT:
            query = normalize(query_vector) if normalize_vectors else query_vector

            def score_dot(doc: Document) -> tuple[float, dict[str, float]] | None:
                if not doc.vector:
                    return None
                vector = normalize(doc.vector) if normalize_vectors else doc.vector
                return dot(query, vector), {}

            return score_dot

        if mode is SearchMode.HYBRID:
            if metadata_boost and not query_text:
                raise InvalidArgumentError("Hybrid boosts require the query text")

            def score_hybrid(doc: Document) -> tuple[float, dict[str, float]] | None:
                base = self._cosine(query_vector, doc)
                if base is None:
                    return None
                similarity = base[0]
                breakdown = {"similarity": similarity}
                score = similarity
                for field, weight in metadata_boost.items():
                    if query_text and matches_query(query_text, doc.metadata.get(field)):
                        score += weight
                        breakdown[f"boost.{field}"] = weight
                return score, breakdown

            return score_hybrid

        def score_weighted(doc: Document) -> tuple[float, dict[str, float]] | None:
            if not any(doc.field_vectors.values()):
                return None
            breakdown: dict[str, float] = {}
            for field, weight in feature_weights.items():
                vector = doc.field_vectors.get(field)
                if vector:
                    breakdown[field] = cosine_similarity(query_vector, vector) * weight
            return sum(breakdown.values()), breakdown

        return score_weighted

    @staticmethod
    def _cosine(query_vector: Vector, doc: Document) -> tuple[float, dict[str, float]] | None:
        if not doc.vector:
            return None
        return cosine_similarity(query_vector, doc.vector), {}
