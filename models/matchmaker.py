"""
models/matchmaker.py
════════════════════
SemanticSearchEngine — ranks catalogue requirements by semantic similarity
to a free-text query.

Pipeline
────────
  1. Reject empty / whitespace-only queries (InvalidQueryError)
  2. Normalise the query and embed it ONCE
  3. Normalise every candidate description and embed it
       • identical normalised texts are embedded once per call
       • embedding runs on a thread pool; vectors are collected back in
         candidate order before ranking, so worker scheduling can never
         change the result
  4. Keep candidates with cosine >= threshold, best first, ties in input order

Usage
─────
  from models.embedder import HashingEmbedder
  from models.matchmaker import SemanticSearchEngine

  engine  = SemanticSearchEngine(HashingEmbedder())
  results = engine.search("Encrypt data at rest", catalogue.requirements())
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

import numpy as np

from config.settings import get_settings
from models.embedder import EmbeddingProvider
from models.entities import StandardRequirement
from models.preprocessor import normalize_text
from models.scorer import rank_candidates
from utils.logger import logger


class InvalidQueryError(ValueError):
    """The search query is empty or whitespace only."""


class SearchCancelledError(RuntimeError):
    """The caller cancelled the search before all candidates were embedded."""


class SemanticSearchEngine:
    """
    Parameters
    ----------
    embedder    : any EmbeddingProvider (must be safe to call from threads
                  when max_workers > 1)
    threshold   : minimum cosine similarity kept (inclusive);
                  defaults to settings.similarity_threshold
    max_workers : embedding thread-pool size; <= 1 embeds sequentially.
                  Defaults to settings.search_workers
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        threshold: float | None = None,
        max_workers: int | None = None,
    ) -> None:
        settings = get_settings()
        self.embedder = embedder
        self.threshold = settings.similarity_threshold if threshold is None else threshold
        self.max_workers = settings.search_workers if max_workers is None else max_workers

    # ── public API ────────────────────────────────────────────────────────────

    def search(
        self,
        query: str,
        candidates: Sequence[StandardRequirement],
        cancel_event: threading.Event | None = None,
    ) -> list[StandardRequirement]:
        """
        Return the candidates similar to `query`, most similar first.

        An empty list means nothing cleared the threshold; an unusable
        query raises InvalidQueryError instead. Embedding failures are
        re-raised unchanged. If `cancel_event` is set mid-search,
        SearchCancelledError is raised and no partial result is returned.
        """
        if query is None or not query.strip():
            raise InvalidQueryError("Query cannot be empty.")

        query_vec = self.embedder.embed(normalize_text(query))

        unique = list(dict.fromkeys(candidates))   # same object listed twice → once
        if not unique:
            logger.info("Search skipped: no candidates")
            return []

        texts = [normalize_text(c.description) for c in unique]
        vectors = self._embed_all(texts, cancel_event)

        ranked = rank_candidates(
            query_vec, list(zip(unique, vectors)), threshold=self.threshold
        )
        logger.info(
            f"Search '{query[:60]}': {len(ranked):,} / {len(unique):,} candidates "
            f">= {self.threshold}"
        )
        return ranked

    # ── embedding fan-out ─────────────────────────────────────────────────────

    def _embed_all(
        self, texts: list[str], cancel_event: threading.Event | None
    ) -> list[np.ndarray]:
        distinct = list(dict.fromkeys(texts))

        def _embed(text: str) -> np.ndarray:
            if cancel_event is not None and cancel_event.is_set():
                raise SearchCancelledError("Search cancelled by caller")
            return self.embedder.embed(text)

        if self.max_workers > 1 and len(distinct) > 1:
            workers = min(self.max_workers, len(distinct))
            logger.debug(f"Embedding {len(distinct):,} texts on {workers} workers")
            with ThreadPoolExecutor(max_workers=workers) as ex:
                futures = [ex.submit(_embed, t) for t in distinct]
                try:
                    # collected in submission order, not completion order
                    embedded = [f.result() for f in futures]
                except Exception:
                    for f in futures:
                        f.cancel()
                    raise
        else:
            embedded = [_embed(t) for t in distinct]

        by_text = dict(zip(distinct, embedded))
        return [by_text[t] for t in texts]
