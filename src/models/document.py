"""Source document data model."""

from pydantic import BaseModel, ConfigDict


class SourceDocument(BaseModel):
    """A document extracted from an external source (Wikipedia page, PDF file or page).

    Consumed once by the segmenter and not retained after indexing.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    full_text: str
    source_url: str
    page_number: int | None = None  # 1-based, set only for page-granular PDF documents
