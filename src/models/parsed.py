"""Intermediate segmentation data models."""

from pydantic import BaseModel, ConfigDict


class Section(BaseModel):
    """A heading-delimited section of a document's full text.

    Produced by heading-based splitting and consumed immediately by chunk
    construction; never persisted.
    """

    model_config = ConfigDict(frozen=True)

    title: str  # heading label, or "Introduction" for leading text
    body_text: str  # untrimmed text between this heading and the next
