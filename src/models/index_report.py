"""Index build report models."""

from pydantic import BaseModel, Field


class IndexFailure(BaseModel):
    """A single source item that could not be indexed."""

    item: str  # document title, Wikipedia title or file path
    error: str


class IndexReport(BaseModel):
    """Outcome of one index build run."""

    indexed_documents: int = 0
    indexed_chunks: int = 0
    skipped_documents: int = 0  # documents that produced zero chunks
    failures: list[IndexFailure] = Field(default_factory=list)

    @property
    def failed_items(self) -> list[str]:
        return [failure.item for failure in self.failures]
