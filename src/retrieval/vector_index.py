"""Approximate nearest-neighbor vector index adapters."""

import logging
from pathlib import Path
from typing import Any, Protocol

from src.errors import MalformedUpstreamError
from src.models.query_result import RetrievalCandidate

logger = logging.getLogger(__name__)


class VectorIndex(Protocol):
    """Stores (id, vector, metadata) tuples and answers top-k queries.

    Never a source of chunk content; only IDs and scores are trusted.
    """

    def upsert(self, id: str, vector: list[float], metadata: dict[str, str]) -> None: ...

    def query(
        self, vector: list[float], top_k: int, include_metadata: bool = True
    ) -> list[RetrievalCandidate]: ...

    def delete(self, ids: list[str]) -> None: ...


class ChromaVectorIndex:
    """ChromaDB collection used as the vector index.

    The collection uses cosine distance; scores are reported as
    ``1 - distance`` so higher means more similar.

    Args:
        persist_dir: Directory for the persistent Chroma database.
        collection_name: Name of the collection holding chunk vectors.
        client: Optional pre-built Chroma client.
    """

    def __init__(
        self,
        persist_dir: str | Path,
        collection_name: str,
        client: Any | None = None,
    ) -> None:
        self._collection_name = collection_name
        if client is None:
            import chromadb

            client = chromadb.PersistentClient(path=str(persist_dir))
        self._client = client
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def upsert(self, id: str, vector: list[float], metadata: dict[str, str]) -> None:
        self._collection.upsert(
            ids=[id],
            embeddings=[vector],
            metadatas=[metadata or {"source": ""}],
        )

    def query(
        self, vector: list[float], top_k: int, include_metadata: bool = True
    ) -> list[RetrievalCandidate]:
        """Return up to ``top_k`` candidates, most similar first.

        Raises:
            MalformedUpstreamError: If Chroma's response lacks ids or
                distances.
        """
        available = self._collection.count()
        if available == 0:
            return []

        include = ["distances", "metadatas"] if include_metadata else ["distances"]
        results = self._collection.query(
            query_embeddings=[vector],
            n_results=min(top_k, available),
            include=include,
        )

        ids = results.get("ids")
        distances = results.get("distances")
        if ids is None or distances is None:
            raise MalformedUpstreamError(
                "Chroma query response is missing ids or distances",
                source="chroma",
                item=self._collection_name,
            )

        row_ids = ids[0] if ids else []
        row_distances = distances[0] if distances else []
        if len(row_ids) != len(row_distances):
            raise MalformedUpstreamError(
                f"Chroma returned {len(row_ids)} ids but {len(row_distances)} distances",
                source="chroma",
                item=self._collection_name,
            )

        metadatas = results.get("metadatas") if include_metadata else None
        row_metadata = metadatas[0] if metadatas else [None] * len(row_ids)

        logger.debug("Chroma query: top_k=%d returned=%d", top_k, len(row_ids))
        return [
            RetrievalCandidate(
                id=candidate_id,
                score=1.0 - float(distance),
                metadata=dict(meta) if meta else None,
            )
            for candidate_id, distance, meta in zip(row_ids, row_distances, row_metadata)
        ]

    def delete(self, ids: list[str]) -> None:
        if ids:
            self._collection.delete(ids=ids)

    def count(self) -> int:
        return self._collection.count()
