"""Heading-aware segmentation of long-form text into addressable chunks."""

import logging
import re

from src.config import SegmentationConfig
from src.ingestion.identifiers import derive_id
from src.models.chunk import Chunk
from src.models.document import SourceDocument
from src.models.parsed import Section

logger = logging.getLogger(__name__)

INTRODUCTION = "Introduction"


class ArticleSegmenter:
    """Splits documents into labeled sections and bounded chunks.

    Segmentation strategy:
    1. Heading split: scan for heading markers with the configured pattern.
       Text before the first heading (or the whole text, if there are no
       headings) becomes an "Introduction" section. Excluded sections such
       as "References" are dropped.
    2. Sub-chunking: if ``max_chunk_chars`` is set, a section body longer
       than the budget is split into overlapping windows that break on
       whitespace. Otherwise each section is one chunk.

    Chunk IDs depend only on (document title, section title, chunk index),
    so segmenting unchanged input twice yields identical chunks.

    Args:
        config: SegmentationConfig with the heading pattern, excluded
                section titles, and chunk size budget.
    """

    def __init__(self, config: SegmentationConfig) -> None:
        self._config = config
        self._heading_re = re.compile(config.heading_pattern, re.MULTILINE)
        self._excluded = frozenset(config.excluded_sections)

    @property
    def config(self) -> SegmentationConfig:
        return self._config

    def split_sections(self, text: str) -> list[Section]:
        """Split text into sections at heading markers.

        Args:
            text: Full document text.

        Returns:
            Sections in document order, excluded headings removed. Bodies
            are returned untrimmed.
        """
        matches = list(self._heading_re.finditer(text))

        if not matches:
            return [Section(title=INTRODUCTION, body_text=text)]

        sections: list[Section] = []
        if matches[0].start() > 0:
            sections.append(Section(title=INTRODUCTION, body_text=text[: matches[0].start()]))

        for i, match in enumerate(matches):
            label = match.group(1).strip()
            if label in self._excluded:
                continue

            body_end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
            sections.append(Section(title=label, body_text=text[match.end() : body_end]))

        return sections

    def segment(self, document: SourceDocument) -> list[Chunk]:
        """Split a document into section chunks.

        A heading label that occurs more than once in the same document
        continues the chunk numbering of its earlier occurrence, so every
        chunk of a document gets a distinct ID.

        Args:
            document: The document to segment.

        Returns:
            Chunks in document order. Empty when the document has no text
            or only excluded or blank sections.
        """
        if not document.full_text.strip():
            return []

        sections = self.split_sections(document.full_text)
        next_index: dict[str, int] = {}
        chunks: list[Chunk] = []

        for section in sections:
            body = section.body_text.strip()
            if not body:
                continue

            for piece in self._split_body(body):
                index = next_index.get(section.title, 0)
                next_index[section.title] = index + 1
                chunks.append(
                    Chunk(
                        id=derive_id(document.title, section=section.title, chunk_index=index),
                        title=document.title,
                        section=section.title,
                        chunk_index=index,
                        content=piece,
                        source_page_url=document.source_url,
                        page_number=document.page_number,
                    )
                )

        logger.debug(
            "Segmented '%s' into %d chunks from %d sections",
            document.title,
            len(chunks),
            len(sections),
        )
        return chunks

    def segment_whole(self, document: SourceDocument) -> list[Chunk]:
        """Wrap a whole document (or a single PDF page) in one chunk.

        The ID derives from the title, plus the page number for page
        documents.

        Args:
            document: The document to wrap.

        Returns:
            A one-element list, or an empty list when the text is blank.
        """
        content = document.full_text.strip()
        if not content:
            return []

        return [
            Chunk(
                id=derive_id(document.title, page_number=document.page_number),
                title=document.title,
                section="",
                chunk_index=0,
                content=content,
                source_page_url=document.source_url,
                page_number=document.page_number,
            )
        ]

    def _split_body(self, body: str) -> list[str]:
        """Split a trimmed section body into windows within the size budget.

        Windows end at the last whitespace inside the budget when there is
        one, and the next window starts ``chunk_overlap_chars`` earlier,
        moved forward to the next word start.

        Args:
            body: Trimmed, non-empty section text.

        Returns:
            Non-empty pieces, each at most ``max_chunk_chars`` long.
        """
        budget = self._config.max_chunk_chars
        if budget is None or len(body) <= budget:
            return [body]

        overlap = self._config.chunk_overlap_chars
        pieces: list[str] = []
        start = 0
        previous_end = 0

        while start < len(body):
            end = min(start + budget, len(body))
            if end < len(body):
                end = _last_break(body, start, end)

            if end <= previous_end:
                # The overlap window would end inside the previous one; drop the overlap.
                start = _skip_whitespace(body, previous_end)
                continue

            piece = body[start:end].strip()
            if piece:
                pieces.append(piece)

            if end >= len(body):
                break

            previous_end = end
            next_start = max(end - overlap, start + 1)
            start = _next_word_start(body, next_start, end)

        return pieces


def _last_break(text: str, start: int, end: int) -> int:
    """Return the best cut position in (start, end], preferring whitespace."""
    if text[end].isspace():
        return end
    for pos in range(end - 1, start, -1):
        if text[pos].isspace():
            return pos
    return end


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _next_word_start(text: str, pos: int, limit: int) -> int:
    """Move pos forward to the start of the next word, but not past limit."""
    if pos == 0 or text[pos - 1].isspace():
        return pos
    while pos < limit and not text[pos].isspace():
        pos += 1
    while pos < limit and text[pos].isspace():
        pos += 1
    return pos
