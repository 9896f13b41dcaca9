"""Document ingestion: extraction, segmentation and index building."""

from src.ingestion.identifiers import derive_id, to_url_safe_id
from src.ingestion.index_builder import IndexBuilder
from src.ingestion.parser import DocumentParser
from src.ingestion.segmenter import ArticleSegmenter
from src.ingestion.wikipedia import WikipediaClient

__all__ = [
    "ArticleSegmenter",
    "DocumentParser",
    "IndexBuilder",
    "WikipediaClient",
    "derive_id",
    "to_url_safe_id",
]
