"""Joins ranked vector-index candidates against the chunk store."""

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from src.models.chunk import Chunk
from src.models.query_result import RetrievalCandidate
from src.retrieval.embedder import Embedder
from src.retrieval.vector_index import VectorIndex

logger = logging.getLogger(__name__)


class ChunkLookup(Protocol):
    """The part of the chunk store the join needs."""

    def get_by_ids(self, ids: Iterable[str], preserve_order: bool = False) -> list[Chunk]: ...


def correlate(
    candidates: Sequence[RetrievalCandidate],
    chunk_store: ChunkLookup,
    k: int,
) -> list[Chunk]:
    """Re-rank stored chunks by the scores of the index candidates.

    The store may return records in any order and may no longer hold some
    candidate IDs; those candidates are dropped and the result can be
    shorter than ``k``. Order always comes from the candidate scores,
    never from the store.

    Args:
        candidates: Index matches, in the order the index returned them.
            Entries with a null or empty ID are ignored; for a repeated ID
            the first occurrence wins.
        chunk_store: Store queried once with all surviving IDs.
        k: Maximum number of chunks to return.

    Returns:
        At most ``k`` chunks, highest score first. Equal scores keep the
        index's relative order.
    """
    scores: dict[str, float] = {}
    rank: dict[str, int] = {}
    for candidate in candidates:
        if not candidate.id or candidate.id in scores:
            continue
        rank[candidate.id] = len(rank)
        scores[candidate.id] = candidate.score

    if not scores:
        return []

    fetched = list({c.id: c for c in chunk_store.get_by_ids(list(scores))}.values())

    missing = len(scores) - len(fetched)
    if missing > 0:
        logger.info("%d of %d candidates are missing from the chunk store", missing, len(scores))

    # sorted() is stable, so ordering by index rank first keeps tie order
    by_index_order = sorted(fetched, key=lambda c: rank.get(c.id, len(rank)))
    ranked = sorted(by_index_order, key=lambda c: scores.get(c.id, 0.0), reverse=True)
    return ranked[:k]


class ChunkRetriever:
    """Finds the top-k stored chunks for a query.

    Pipeline: embed query, query the vector index, batch-fetch chunk
    bodies, re-rank by score. Adapter failures propagate to the caller.

    Args:
        embedder: Produces the query embedding.
        vector_index: Returns scored candidate IDs.
        chunk_store: Holds the chunk bodies.
        dimensions: Embedding size the index was built with.
    """

    def __init__(
        self,
        embedder: Embedder,
        vector_index: VectorIndex,
        chunk_store: ChunkLookup,
        dimensions: int,
    ) -> None:
        self._embedder = embedder
        self._vector_index = vector_index
        self._chunk_store = chunk_store
        self._dimensions = dimensions

    def find_top_k(self, query: str, k: int) -> list[Chunk]:
        """Return up to ``k`` chunks most relevant to a query text.

        A blank query returns an empty list without calling any adapter.

        Raises:
            ValueError: If ``k`` is not positive.
        """
        _check_k(k)
        if not query or not query.strip():
            return []

        vector = self._embedder.embed(query, self._dimensions)
        return self.find_top_k_by_vector(vector, k)

    def find_top_k_by_vector(self, vector: list[float], k: int) -> list[Chunk]:
        """Return up to ``k`` chunks nearest to an already computed embedding."""
        _check_k(k)
        candidates = self._vector_index.query(vector, k, include_metadata=True)
        results = correlate(candidates, self._chunk_store, k)
        logger.info("Retrieved %d chunks (candidates=%d, k=%d)", len(results), len(candidates), k)
        return results


def _check_k(k: int) -> None:
    if k <= 0:
        raise ValueError(f"k must be a positive integer, got {k}")
