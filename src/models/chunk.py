"""Chunk data model."""

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """A single retrievable, embeddable unit of text with a stable identifier."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    section: str = ""
    chunk_index: int = Field(default=0, ge=0)
    content: str
    source_page_url: str = ""
    page_number: int | None = None
