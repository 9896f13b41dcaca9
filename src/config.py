"""Configuration loader for the Landmark RAG application."""

import os
import re
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Wiki-style headings as returned by the MediaWiki extracts API ("== History ==").
WIKI_HEADING_PATTERN = r"^\s*=+\s*(.+?)\s*=+\s*"
# Markdown-style headings ("## Eiffel Tower").
MARKDOWN_HEADING_PATTERN = r"^#{2,6}\s+(.+?)\s*$"


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Landmark RAG"
    version: str = "1.0.0"


class EmbeddingConfig(BaseModel):
    """Embedding model configuration."""

    model: str = "text-embedding-3-small"
    dimensions: int = 512


class SegmentationConfig(BaseModel):
    """Heading-based segmentation and sub-chunking configuration.

    ``max_chunk_chars`` set to ``None`` keeps one chunk per section.
    """

    heading_pattern: str = WIKI_HEADING_PATTERN
    excluded_sections: list[str] = Field(
        default_factory=lambda: ["See also", "References", "External links", "Notes"]
    )
    max_chunk_chars: int | None = 1500
    chunk_overlap_chars: int = 150

    @model_validator(mode="after")
    def _check_budget(self) -> "SegmentationConfig":
        try:
            pattern = re.compile(self.heading_pattern)
        except re.error as e:
            raise ValueError(f"heading_pattern is not a valid regular expression: {e}") from e
        if pattern.groups < 1:
            raise ValueError("heading_pattern must capture the heading label in a group")
        if self.max_chunk_chars is not None:
            if self.max_chunk_chars <= 0:
                raise ValueError("max_chunk_chars must be positive")
            if not 0 <= self.chunk_overlap_chars < self.max_chunk_chars:
                raise ValueError("chunk_overlap_chars must be in [0, max_chunk_chars)")
        return self


class RetrievalConfig(BaseModel):
    """Retrieval pipeline configuration."""

    top_k: int = 5


class GenerationConfig(BaseModel):
    """LLM generation configuration."""

    provider: str = "anthropic"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1000
    temperature: float = 0.2


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    sqlite_path: str = "./db/chunks.db"
    chroma_dir: str = "./db/chroma"
    collection_name: str = "landmark-chunks"


class WikipediaConfig(BaseModel):
    """Wikipedia API client configuration."""

    api_url: str = "https://en.wikipedia.org/w/api.php"
    user_agent: str = "LandmarkRAG/1.0 (contact: you@example.com)"
    timeout_seconds: float = 30.0


class LoggingConfig(BaseModel):
    """Root logger configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    wikipedia: WikipediaConfig = Field(default_factory=WikipediaConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # API keys loaded from environment
    anthropic_api_key: str | None = None
    openai_api_key: str | None = None


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Override API keys from environment
    config.anthropic_api_key = os.getenv("ANTHROPIC_API_KEY")
    config.openai_api_key = os.getenv("OPENAI_API_KEY")

    return config
