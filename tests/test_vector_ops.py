"""Tests for vector operations."""

import math

import pytest

from simsearch.exceptions import DimensionMismatchError, ErrorCode
from simsearch.vectors.ops import add, cosine_similarity, dot, is_finite, norm, normalize


class TestDot:
    """Tests for dot product."""

    def test_dot_product(self) -> None:
        """Sum of elementwise products."""
        assert dot([1.0, 2.0, 3.0], [4.0, 5.0, 6.0]) == 32.0

    def test_symmetric(self) -> None:
        """dot(a, b) == dot(b, a)."""
        a, b = [0.3, -1.2, 4.0], [2.5, 0.1, -0.7]
        assert dot(a, b) == pytest.approx(dot(b, a))

    def test_distributes_over_addition(self) -> None:
        """dot(a, b + c) == dot(a, b) + dot(a, c)."""
        a, b, c = [1.0, 2.0], [3.0, -1.0], [0.5, 4.0]
        assert dot(a, add(b, c)) == pytest.approx(dot(a, b) + dot(a, c))

    def test_dimension_mismatch(self) -> None:
        """Vectors of different length are rejected, never padded."""
        with pytest.raises(DimensionMismatchError) as exc_info:
            dot([1.0, 2.0], [1.0, 2.0, 3.0])

        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 3
        assert exc_info.value.code == ErrorCode.DIMENSION_MISMATCH


class TestNorm:
    """Tests for norm and normalize."""

    def test_norm(self) -> None:
        """Euclidean norm."""
        assert norm([3.0, 4.0]) == 5.0

    def test_normalize_unit_length(self) -> None:
        """Normalized vector has unit length."""
        result = normalize([3.0, 4.0])
        assert result == pytest.approx([0.6, 0.8])
        assert norm(result) == pytest.approx(1.0)

    def test_normalize_zero_vector(self) -> None:
        """Zero vector is returned unchanged."""
        assert normalize([0.0, 0.0]) == [0.0, 0.0]


class TestCosineSimilarity:
    """Tests for cosine similarity."""

    def test_identical_vectors(self) -> None:
        """A vector is maximally similar to itself."""
        assert cosine_similarity([0.2, 0.7, 0.1], [0.2, 0.7, 0.1]) == pytest.approx(1.0)

    def test_opposite_vectors(self) -> None:
        """Opposite vectors score -1."""
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_orthogonal_vectors(self) -> None:
        """Orthogonal vectors score 0."""
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0

    def test_symmetric(self) -> None:
        """cosine(a, b) == cosine(b, a)."""
        a, b = [1.0, 3.0, -2.0], [0.5, 0.5, 4.0]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_scale_invariant(self) -> None:
        """Scaling either vector does not change the score."""
        a, b = [1.0, 2.0], [3.0, 1.0]
        assert cosine_similarity(a, b) == pytest.approx(
            cosine_similarity([10 * x for x in a], b)
        )

    def test_zero_vector(self) -> None:
        """Zero norm yields 0.0 rather than NaN."""
        result = cosine_similarity([0.0, 0.0], [1.0, 1.0])
        assert result == 0.0
        assert not math.isnan(result)

    def test_bounded(self) -> None:
        """Scores lie in [-1, 1]."""
        result = cosine_similarity([0.9, -0.3, 0.2], [-0.1, 0.8, 0.4])
        assert -1.0 <= result <= 1.0

    def test_equals_dot_of_normalized(self) -> None:
        """Cosine equals the dot product of unit vectors."""
        a, b = [2.0, 1.0, 0.5], [0.3, 4.0, 1.0]
        assert cosine_similarity(a, b) == pytest.approx(dot(normalize(a), normalize(b)))

    def test_dimension_mismatch(self) -> None:
        """Mismatched vectors raise instead of scoring."""
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([1.0], [1.0, 0.0])


class TestIsFinite:
    """Tests for is_finite."""

    def test_finite(self) -> None:
        """Ordinary and empty vectors are finite."""
        assert is_finite([0.5, -2.0])
        assert is_finite([])

    def test_nan_and_inf(self) -> None:
        """Any NaN or infinite component makes the vector non-finite."""
        assert not is_finite([1.0, math.nan])
        assert not is_finite([math.inf, 0.0])
        assert not is_finite([0.0, -math.inf])
