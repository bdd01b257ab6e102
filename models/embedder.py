"""
models/embedder.py
──────────────────
Embedding providers: anything with `embed(normalized_text) -> vector`.

The search engine only depends on the `EmbeddingProvider` protocol, so a
trained model's feature extractor, the hashing fallback below, or a test
stub can be swapped in without touching the ranking code.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
from sklearn.feature_extraction.text import HashingVectorizer

from utils.logger import logger

EMBEDDING_DIM = 512


@runtime_checkable
class EmbeddingProvider(Protocol):
    def embed(self, normalized_text: str) -> np.ndarray:
        """Return a fixed-length vector; same text must give the same vector."""
        ...


class HashingEmbedder:
    """
    Stateless bag-of-words embedder backed by scikit-learn's HashingVectorizer.

    No fitting and no vocabulary, so it is deterministic across processes
    and safe to call from several threads at once. Text with no tokens
    maps to the zero vector.

    Parameters
    ----------
    dim          : output vector length (hash buckets)
    ngram_range  : word n-gram range fed to the hasher
    """

    def __init__(self, dim: int = EMBEDDING_DIM, ngram_range: tuple[int, int] = (1, 2)) -> None:
        self.dim = dim
        self._vectorizer = HashingVectorizer(
            n_features=dim,
            ngram_range=ngram_range,
            alternate_sign=False,
            norm="l2",
            lowercase=False,   # callers pass normalised text
        )
        logger.debug(f"HashingEmbedder ready (dim={dim}, ngram_range={ngram_range})")

    def embed(self, normalized_text: str) -> np.ndarray:
        if not normalized_text:
            return np.zeros(self.dim, dtype=np.float32)
        row = self._vectorizer.transform([normalized_text])
        return row.toarray()[0].astype(np.float32)
