"""
models/scorer.py
────────────────
Cosine similarity between embedding vectors, and threshold + stable
ranking of scored candidates.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

import numpy as np

DEFAULT_THRESHOLD = 0.75

T = TypeVar("T")


def cosine_similarity(vec_a, vec_b) -> float:
    """
    Cosine similarity in [-1, 1].

    Returns 0.0 when the lengths differ or when either vector has zero
    magnitude (two zero vectors also score 0.0).
    """
    a = np.asarray(vec_a, dtype=np.float64).ravel()
    b = np.asarray(vec_b, dtype=np.float64).ravel()
    if a.shape != b.shape:
        return 0.0

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.clip(np.dot(a, b) / (norm_a * norm_b), -1.0, 1.0))


def score_candidates(query_vec, candidate_vecs: Sequence) -> np.ndarray:
    return np.array(
        [cosine_similarity(query_vec, vec) for vec in candidate_vecs],
        dtype=np.float64,
    )


def rank_by_score(scores: np.ndarray, threshold: float = DEFAULT_THRESHOLD) -> np.ndarray:
    """
    Indices of scores >= threshold, highest first.
    Equal scores keep their input order (stable sort).
    """
    scores = np.asarray(scores, dtype=np.float64)
    keep = np.flatnonzero(scores >= threshold)
    return keep[np.argsort(-scores[keep], kind="stable")]


def rank_candidates(
    query_vec,
    candidates: Sequence[tuple[T, object]],
    threshold: float = DEFAULT_THRESHOLD,
) -> list[T]:
    """
    Score each (item, vector) pair against `query_vec`, drop those below
    `threshold` and return the surviving items best-first.
    """
    if not candidates:
        return []
    scores = score_candidates(query_vec, [vec for _, vec in candidates])
    return [candidates[i][0] for i in rank_by_score(scores, threshold)]
