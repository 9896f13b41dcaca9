"""Batch index building: segment, embed, upsert and store documents."""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from src.config import MARKDOWN_HEADING_PATTERN, SegmentationConfig
from src.ingestion.parser import DocumentParser
from src.ingestion.segmenter import ArticleSegmenter
from src.ingestion.wikipedia import WikipediaClient
from src.models.chunk import Chunk
from src.models.document import SourceDocument
from src.models.index_report import IndexFailure, IndexReport
from src.retrieval.embedder import Embedder
from src.retrieval.vector_index import VectorIndex
from src.storage.chunk_store import ChunkStore

logger = logging.getLogger(__name__)

Segment = Callable[[SourceDocument], list[Chunk]]


class IndexBuilder:
    """Indexes documents one at a time into the chunk store and vector index.

    Every chunk is committed on its own (store write, then vector upsert),
    so a failure never undoes earlier work. Re-indexing a document removes
    chunks of the same title that its new segmentation no longer produces.
    A failing document is logged and recorded in the returned IndexReport,
    and the run moves on to the next one.

    Args:
        embedder: Embeds chunk content.
        vector_index: Receives (id, vector, metadata) per chunk.
        chunk_store: Receives chunk bodies.
        segmenter: Default segmenter for section-mode indexing.
        dimensions: Embedding size.
    """

    def __init__(
        self,
        embedder: Embedder,
        vector_index: VectorIndex,
        chunk_store: ChunkStore,
        segmenter: ArticleSegmenter,
        dimensions: int,
    ) -> None:
        self._embedder = embedder
        self._vector_index = vector_index
        self._chunk_store = chunk_store
        self._segmenter = segmenter
        self._dimensions = dimensions

    def index_chunks(self, chunks: Iterable[Chunk]) -> int:
        """Embed and persist chunks; returns how many were indexed."""
        count = 0
        for chunk in chunks:
            vector = self._embedder.embed(chunk.content, self._dimensions)
            self._chunk_store.save(chunk)
            self._vector_index.upsert(chunk.id, vector, _vector_metadata(chunk))
            count += 1
        return count

    def prune_stale(self, title: str, keep: Iterable[str]) -> int:
        """Remove chunks of ``title`` left over from an earlier indexing run.

        Vector entries are deleted before store rows, so a failure part way
        never leaves an index hit without its chunk body.

        Args:
            title: Document title whose chunks are checked.
            keep: IDs produced by the current segmentation.

        Returns:
            Number of stale chunks removed.
        """
        kept = set(keep)
        stale = [chunk_id for chunk_id in self._chunk_store.ids_for_title(title) if chunk_id not in kept]
        if not stale:
            return 0

        self._vector_index.delete(stale)
        self._chunk_store.delete(stale)
        logger.debug("Pruned %d stale chunks of '%s'", len(stale), title)
        return len(stale)

    def index_documents(
        self,
        documents: Iterable[SourceDocument],
        segment: Segment | None = None,
        report: IndexReport | None = None,
    ) -> IndexReport:
        """Segment and index a sequence of documents.

        Args:
            documents: Documents to index, in order.
            segment: Function turning a document into chunks. Defaults to
                section-mode segmentation.
            report: Report to extend; a new one is created if omitted.

        Returns:
            The report with counts and per-document failures.
        """
        segment = segment or self._segmenter.segment
        report = report or IndexReport()

        for document in documents:
            try:
                chunks = segment(document)
                if not chunks:
                    logger.info("No indexable text in '%s', skipping", document.title)
                    self.prune_stale(document.title, keep=[])
                    report.skipped_documents += 1
                    continue

                report.indexed_chunks += self.index_chunks(chunks)
                report.indexed_documents += 1
                pruned = self.prune_stale(document.title, keep=[c.id for c in chunks])
                logger.info(
                    "Indexed '%s' (%d chunks, %d stale removed)", document.title, len(chunks), pruned
                )
            except Exception as e:
                logger.exception("Failed to index '%s'", document.title)
                report.failures.append(IndexFailure(item=document.title, error=str(e)))

        return report

    def build_from_wikipedia(
        self,
        titles: Iterable[str],
        client: WikipediaClient,
        full: bool = True,
    ) -> IndexReport:
        """Fetch and index Wikipedia articles by title.

        A title that cannot be fetched is recorded as a failure and does
        not stop the run.
        """
        report = IndexReport()
        for title in titles:
            try:
                document = client.get_page(title, full=full)
            except Exception as e:
                logger.exception("Failed to fetch Wikipedia page '%s'", title)
                report.failures.append(IndexFailure(item=title, error=str(e)))
                continue
            self.index_documents([document], report=report)
        return report

    def build_from_pdf(
        self,
        pdf_path: str | Path,
        parser: DocumentParser,
        parse_by_page: bool = False,
    ) -> IndexReport:
        """Index a PDF as one document, or one document per page.

        Raises:
            FileNotFoundError: If the PDF does not exist.
        """
        if parse_by_page:
            documents = parser.parse_pages(pdf_path)
        else:
            documents = [parser.parse(pdf_path)]
        return self.index_documents(documents, segment=self._segmenter.segment_whole)

    def build_from_pdf_with_separator(
        self,
        pdf_path: str | Path,
        parser: DocumentParser,
        heading_pattern: str = MARKDOWN_HEADING_PATTERN,
    ) -> IndexReport:
        """Index a PDF whose text marks sections with a heading pattern.

        Raises:
            FileNotFoundError: If the PDF does not exist.
            pydantic.ValidationError: If the pattern has no capturing group.
        """
        config = SegmentationConfig(
            **{**self._segmenter.config.model_dump(), "heading_pattern": heading_pattern}
        )
        segmenter = ArticleSegmenter(config)
        return self.index_documents([parser.parse(pdf_path)], segment=segmenter.segment)


def _vector_metadata(chunk: Chunk) -> dict[str, str]:
    metadata = {
        "title": chunk.title,
        "section": chunk.section,
        "chunk_index": str(chunk.chunk_index),
        "source_page_url": chunk.source_page_url,
    }
    if chunk.page_number is not None:
        metadata["page_number"] = str(chunk.page_number)
    return metadata
