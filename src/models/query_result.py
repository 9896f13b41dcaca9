"""Retrieval and query result data models."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from src.models.chunk import Chunk


class RetrievalCandidate(BaseModel):
    """One vector-index match: an ID with its similarity score."""

    model_config = ConfigDict(frozen=True)

    id: str | None
    score: float
    metadata: dict[str, Any] | None = None


class GeneratedAnswer(BaseModel):
    """An LLM-generated answer with metadata."""

    text: str
    model_used: str = ""
    tokens_used: int = 0
    latency_ms: int = 0


class QueryResult(BaseModel):
    """A complete query result: question, ranked sources, and answer."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    question: str
    sources: list[Chunk] = Field(default_factory=list)
    answer: GeneratedAnswer | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
