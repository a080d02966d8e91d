"""Pure vector operations.

These functions are the only place similarity arithmetic lives. Higher
level scoring (cosine, dot product, hybrid, weighted) goes through them.
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from simsearch.exceptions import DimensionMismatchError

Vector = list[float]
VectorLike = Sequence[float] | npt.NDArray[np.floating]


def _as_array(vector: VectorLike) -> npt.NDArray[np.float64]:
    return np.asarray(vector, dtype=np.float64)


def check_dimensions(a: VectorLike, b: VectorLike) -> None:
    """Raise DimensionMismatchError unless both vectors have the same length."""
    if len(a) != len(b):
        raise DimensionMismatchError(expected=len(a), actual=len(b))


def dot(a: VectorLike, b: VectorLike) -> float:
    """Sum of elementwise products.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    check_dimensions(a, b)
    return float(np.dot(_as_array(a), _as_array(b)))


def norm(a: VectorLike) -> float:
    """Euclidean (L2) norm."""
    return float(np.linalg.norm(_as_array(a)))


def normalize(a: VectorLike) -> Vector:
    """Scale a vector to unit length.

    A zero vector is returned unchanged rather than divided by zero.
    """
    magnitude = norm(a)
    if magnitude == 0:
        return [float(x) for x in a]
    return (_as_array(a) / magnitude).tolist()


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 when either vector has zero norm, so an empty embedding
    scores lowest instead of producing NaN.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    product = dot(a, b)
    norm_a = norm(a)
    norm_b = norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return product / (norm_a * norm_b)


def add(a: VectorLike, b: VectorLike) -> Vector:
    """Elementwise sum of two equal-length vectors."""
    check_dimensions(a, b)
    return (_as_array(a) + _as_array(b)).tolist()


def is_finite(a: VectorLike) -> bool:
    """True when no component is NaN or infinite."""
    return bool(np.isfinite(_as_array(a)).all())
