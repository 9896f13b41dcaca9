"""Deterministic chunk and document identifiers.

IDs are derived only from natural keys (title, section label, chunk index,
page number), so re-indexing unchanged input upserts the same records
instead of inserting duplicates. Each ID is a readable slug followed by a
BLAKE2b digest of every input component, which keeps distinct inputs apart
even when their slugs coincide ("Rome" vs "rome", "A b" vs "A-b").
"""

import hashlib
import json
import re
import unicodedata

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_MAX_SLUG_LENGTH = 48
_DIGEST_BYTES = 8


def to_url_safe_id(text: str) -> str:
    """Slugify text into lowercase ASCII letters, digits and dashes.

    Args:
        text: Arbitrary (possibly non-Latin) text such as a page title.

    Returns:
        The slug, or "untitled" when nothing slug-safe remains.
    """
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = _NON_SLUG_CHARS.sub("-", folded.lower()).strip("-")
    return slug[:_MAX_SLUG_LENGTH].rstrip("-") or "untitled"


def _digest(key: list[object]) -> str:
    canonical = json.dumps(key, ensure_ascii=False, separators=(",", ":"))
    return hashlib.blake2b(canonical.encode("utf-8"), digest_size=_DIGEST_BYTES).hexdigest()


def derive_id(
    document_title: str,
    section: str | None = None,
    chunk_index: int | None = None,
    page_number: int | None = None,
) -> str:
    """Derive a stable, URL-safe ID for a document, page, or section chunk.

    Modes:
        - whole document: only ``document_title``
        - page: ``document_title`` and ``page_number``
        - section chunk: ``document_title``, ``section`` and ``chunk_index``
          (``chunk_index`` defaults to 0)

    Args:
        document_title: Title of the source document.
        section: Section label for section/chunk mode.
        chunk_index: Zero-based index of the chunk within its section.
        page_number: One-based page number for page mode.

    Returns:
        An ID built from ``[a-z0-9_-]`` characters only.

    Raises:
        ValueError: If the title is blank or the arguments mix modes.
    """
    if not document_title or not document_title.strip():
        raise ValueError("document_title must be a non-empty string")
    if section is not None and page_number is not None:
        raise ValueError("section and page_number are mutually exclusive")
    if chunk_index is not None and section is None:
        raise ValueError("chunk_index requires a section")

    title_slug = to_url_safe_id(document_title)

    if section is not None:
        index = 0 if chunk_index is None else chunk_index
        if index < 0:
            raise ValueError(f"chunk_index must be >= 0, got {index}")
        readable = f"{title_slug}_{to_url_safe_id(section)}_{index}"
        key: list[object] = ["chunk", document_title, section, index]
    elif page_number is not None:
        if page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {page_number}")
        readable = f"{title_slug}_page_{page_number}"
        key = ["page", document_title, page_number]
    else:
        readable = title_slug
        key = ["document", document_title]

    return f"{readable}_{_digest(key)}"
