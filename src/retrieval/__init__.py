"""Query-time retrieval: embeddings, vector index, and the correlation join."""

from src.retrieval.correlation import ChunkRetriever, correlate
from src.retrieval.embedder import Embedder, OpenAIEmbedder
from src.retrieval.vector_index import ChromaVectorIndex, VectorIndex

__all__ = [
    "ChromaVectorIndex",
    "ChunkRetriever",
    "Embedder",
    "OpenAIEmbedder",
    "VectorIndex",
    "correlate",
]
