"""Prompt rendering for retrieval-augmented answers."""

from collections.abc import Sequence

from src.models.chunk import Chunk

RAG_SYSTEM_PROMPT = """You answer questions about landmarks and places using only the \
retrieved article sections provided with each question.

- Base every statement on the retrieved sections. If they do not contain the \
answer, say that you could not find it.
- Mention the title and section you relied on, and include its URL.
- Keep answers concise and factual."""


def render_chunk(chunk: Chunk) -> str:
    """Render one retrieved chunk as a labeled block."""
    lines = [
        f"Title: {chunk.title}",
        f"Section: {chunk.section or 'N/A'}",
        f"Part: {chunk.chunk_index + 1}",
    ]
    if chunk.page_number is not None:
        lines.append(f"Page: {chunk.page_number}")
    lines.append(f"Content: {chunk.content}")
    lines.append(f"URL: {chunk.source_page_url}")
    return "\n".join(lines)


def build_user_prompt(question: str, chunks: Sequence[Chunk]) -> str:
    """Combine the user's question with the ranked retrieved chunks."""
    if chunks:
        context = "\n\n".join(render_chunk(chunk) for chunk in chunks)
    else:
        context = "(no matching sections were found)"

    return f"User question:\n{question.strip()}\n\nRetrieved article sections:\n{context}"
