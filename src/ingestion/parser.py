"""Source file parser supporting PDF and plain-text formats."""

import logging
from pathlib import Path

import chardet

from src.ingestion.identifiers import derive_id
from src.models.document import SourceDocument

logger = logging.getLogger(__name__)

# Supported file extensions mapped to format identifiers
SUPPORTED_FORMATS: dict[str, str] = {
    ".pdf": "pdf",
    ".txt": "txt",
    ".md": "txt",
}


class DocumentParser:
    """Turns local files into SourceDocuments.

    A file can become one document (``parse``) or, for PDFs, one document
    per non-empty page (``parse_pages``).
    """

    def parse(self, file_path: str | Path) -> SourceDocument:
        """Parse a whole file into a single SourceDocument.

        PDF pages are joined with blank lines. The title is the file name
        without its extension.

        Args:
            file_path: Path to the file.

        Returns:
            The document. Its text may be empty for unreadable files.

        Raises:
            FileNotFoundError: If file_path does not exist.
            ValueError: If the file format is not supported.
        """
        path = self._check_path(file_path)
        file_format = self._detect_format(path)

        if file_format == "pdf":
            text = "\n\n".join(page for page in self._read_pdf_pages(path) if page.strip())
        else:
            text = self._parse_txt(path)

        return SourceDocument(
            id=derive_id(path.stem),
            title=path.stem,
            full_text=text.strip(),
            source_url=path.resolve().as_uri(),
        )

    def parse_pages(self, file_path: str | Path) -> list[SourceDocument]:
        """Parse a PDF into one SourceDocument per page.

        Pages without extractable text are skipped.

        Args:
            file_path: Path to the PDF file.

        Returns:
            Documents titled "<name> - Page <n>" with 1-based page numbers.

        Raises:
            FileNotFoundError: If file_path does not exist.
            ValueError: If the file is not a PDF.
        """
        path = self._check_path(file_path)
        if self._detect_format(path) != "pdf":
            raise ValueError(f"Page-level parsing requires a PDF: {path}")

        file_uri = path.resolve().as_uri()
        documents: list[SourceDocument] = []
        for number, page_text in enumerate(self._read_pdf_pages(path), start=1):
            text = page_text.strip()
            if not text:
                logger.debug("Skipping empty page %d of %s", number, path)
                continue
            documents.append(
                SourceDocument(
                    id=derive_id(path.stem, page_number=number),
                    title=f"{path.stem} - Page {number}",
                    full_text=text,
                    source_url=f"{file_uri}#page={number}",
                    page_number=number,
                )
            )
        return documents

    def _check_path(self, file_path: str | Path) -> Path:
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return path

    def _detect_format(self, file_path: Path) -> str:
        """Determine file format from extension.

        Raises:
            ValueError: If extension is not supported.
        """
        ext = file_path.suffix.lower()
        if ext not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported file format: '{ext}'. "
                f"Supported: {', '.join(SUPPORTED_FORMATS.keys())}"
            )
        return SUPPORTED_FORMATS[ext]

    def _read_pdf_pages(self, file_path: Path) -> list[str]:
        """Extract the text of every PDF page using pymupdf (fitz).

        Falls back to joining word boxes when plain text extraction
        returns nothing for a page.

        Args:
            file_path: Path to the PDF file.

        Returns:
            One string per page, in page order. Empty if the PDF cannot
            be opened.
        """
        import fitz  # type: ignore[import-untyped]

        try:
            with fitz.open(str(file_path)) as doc:
                pages = []
                for page in doc:
                    text = page.get_text("text")
                    if not text.strip():
                        words = page.get_text("words")
                        text = " ".join(word[4] for word in words)
                    pages.append(text)
                return pages
        except Exception:
            logger.exception("Failed to parse PDF: %s", file_path)
            return []

    def _parse_txt(self, file_path: Path) -> str:
        """Read a plain text or Markdown file with encoding detection.

        Tries UTF-8 first, then uses chardet for fallback detection.

        Args:
            file_path: Path to the text file.

        Returns:
            The file content as a string.
        """
        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            pass

        raw_bytes = file_path.read_bytes()
        detected = chardet.detect(raw_bytes)
        encoding = detected.get("encoding") or "utf-8"
        confidence = detected.get("confidence", 0)

        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                file_path,
                encoding,
                confidence * 100,
            )

        try:
            return raw_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.error("Failed to decode file: %s", file_path)
            return raw_bytes.decode("utf-8", errors="replace")
