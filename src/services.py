"""Process-wide service handles built from configuration."""

import logging
from dataclasses import dataclass
from pathlib import Path

from src.config import AppConfig
from src.generation.answerer import AnthropicAnswerGenerator, RagQuestionService
from src.ingestion.index_builder import IndexBuilder
from src.ingestion.parser import DocumentParser
from src.ingestion.segmenter import ArticleSegmenter
from src.ingestion.wikipedia import WikipediaClient
from src.retrieval.correlation import ChunkRetriever
from src.retrieval.embedder import OpenAIEmbedder
from src.retrieval.vector_index import ChromaVectorIndex
from src.storage.chunk_store import ChunkStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Handles shared by every request for the lifetime of the process.

    Use as a context manager, or call ``close()`` explicitly, to release
    the HTTP clients.
    """

    config: AppConfig
    chunk_store: ChunkStore
    vector_index: ChromaVectorIndex
    embedder: OpenAIEmbedder
    wikipedia: WikipediaClient
    parser: DocumentParser
    segmenter: ArticleSegmenter
    index_builder: IndexBuilder
    retriever: ChunkRetriever
    generator: AnthropicAnswerGenerator | None = None

    def question_service(self) -> RagQuestionService:
        if self.generator is None:
            raise RuntimeError("Answer generation is not configured (missing ANTHROPIC_API_KEY)")
        return RagQuestionService(self.retriever, self.generator, top_k=self.config.retrieval.top_k)

    def close(self) -> None:
        self.embedder.close()
        self.wikipedia.close()
        if self.generator is not None:
            self.generator.close()

    def __enter__(self) -> "Services":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def build_services(config: AppConfig) -> Services:
    """Create every adapter once from configuration.

    Args:
        config: Loaded application configuration.

    Returns:
        The wired services.

    Raises:
        ValueError: If no OpenAI key is configured or the generation
            provider is unsupported.
    """
    if not config.openai_api_key:
        raise ValueError("OPENAI_API_KEY is not set")
    if config.generation.provider != "anthropic":
        raise ValueError(f"Unsupported generation provider: '{config.generation.provider}'")

    Path(config.storage.chroma_dir).mkdir(parents=True, exist_ok=True)

    chunk_store = ChunkStore(config.storage.sqlite_path)
    vector_index = ChromaVectorIndex(config.storage.chroma_dir, config.storage.collection_name)
    embedder = OpenAIEmbedder(api_key=config.openai_api_key, model=config.embedding.model)
    segmenter = ArticleSegmenter(config.segmentation)
    dimensions = config.embedding.dimensions

    generator = None
    if config.anthropic_api_key:
        generator = AnthropicAnswerGenerator(config.generation, api_key=config.anthropic_api_key)
    else:
        logger.warning("ANTHROPIC_API_KEY is not set; question answering is disabled")

    return Services(
        config=config,
        chunk_store=chunk_store,
        vector_index=vector_index,
        embedder=embedder,
        wikipedia=WikipediaClient(config.wikipedia),
        parser=DocumentParser(),
        segmenter=segmenter,
        index_builder=IndexBuilder(embedder, vector_index, chunk_store, segmenter, dimensions),
        retriever=ChunkRetriever(embedder, vector_index, chunk_store, dimensions),
        generator=generator,
    )
