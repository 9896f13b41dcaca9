"""Data models for the Landmark RAG application."""

from src.models.chunk import Chunk
from src.models.document import SourceDocument
from src.models.index_report import IndexFailure, IndexReport
from src.models.parsed import Section
from src.models.query_result import (
    GeneratedAnswer,
    QueryResult,
    RetrievalCandidate,
)

__all__ = [
    "Chunk",
    "GeneratedAnswer",
    "IndexFailure",
    "IndexReport",
    "QueryResult",
    "RetrievalCandidate",
    "Section",
    "SourceDocument",
]
