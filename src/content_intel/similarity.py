"""Cosine similarity and ranking helpers."""

from typing import Callable, List, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity between two vectors.

    Vectors of different length (e.g. a 16-d model embedding against a 100-d
    fallback vector) and zero-magnitude vectors score 0.0 instead of raising.

    Returns:
        Similarity in [-1.0, 1.0]
    """
    if len(a) != len(b) or len(a) == 0:
        return 0.0

    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)

    magnitude = float(np.linalg.norm(vec_a) * np.linalg.norm(vec_b))
    if magnitude == 0:
        return 0.0

    similarity = float(np.dot(vec_a, vec_b)) / magnitude
    return max(-1.0, min(1.0, similarity))


def rank_by_score(
    items: Sequence[T], score: Callable[[T], float]
) -> List[Tuple[T, float]]:
    """Score every item and sort descending.

    Python's sort is stable, so items with equal scores keep their input order.
    """
    scored = [(item, score(item)) for item in items]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored


def top_k_similar(
    target: Sequence[float],
    candidates: Sequence[Tuple[str, Sequence[float]]],
    k: int,
    exclude: str | None = None,
) -> List[Tuple[str, float]]:
    """Return the k labels whose vectors are most similar to target.

    Args:
        target: Vector to compare against
        candidates: (label, vector) pairs
        k: Maximum number of results
        exclude: Label to leave out (exact string match)

    Returns:
        (label, similarity) pairs, most similar first
    """
    if k <= 0:
        return []
    pool = [(label, vector) for label, vector in candidates if label != exclude]
    ranked = rank_by_score(pool, lambda pair: cosine_similarity(target, pair[1]))
    return [(label, similarity) for (label, _), similarity in ranked[:k]]
