"""Vector arithmetic shared by every scoring mode."""

from simsearch.vectors.ops import (
    Vector,
    add,
    check_dimensions,
    cosine_similarity,
    dot,
    norm,
    normalize,
)

__all__ = [
    "Vector",
    "add",
    "check_dimensions",
    "cosine_similarity",
    "dot",
    "norm",
    "normalize",
]
