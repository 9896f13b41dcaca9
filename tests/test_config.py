"""Tests for configuration loading."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from src.config import (
    MARKDOWN_HEADING_PATTERN,
    WIKI_HEADING_PATTERN,
    AppConfig,
    SegmentationConfig,
    load_config,
)


class TestAppConfigDefaults:
    """Test that AppConfig provides sensible defaults."""

    def test_default_config_creates_successfully(self) -> None:
        config = AppConfig()
        assert config.app.name == "Landmark RAG"

    def test_default_embedding_config(self) -> None:
        config = AppConfig()
        assert config.embedding.model == "text-embedding-3-small"
        assert config.embedding.dimensions == 512

    def test_default_segmentation_config(self) -> None:
        config = AppConfig()
        assert config.segmentation.heading_pattern == WIKI_HEADING_PATTERN
        assert config.segmentation.excluded_sections == [
            "See also",
            "References",
            "External links",
            "Notes",
        ]
        assert config.segmentation.max_chunk_chars == 1500
        assert config.segmentation.chunk_overlap_chars == 150

    def test_default_retrieval_config(self) -> None:
        config = AppConfig()
        assert config.retrieval.top_k == 5

    def test_default_generation_config(self) -> None:
        config = AppConfig()
        assert config.generation.provider == "anthropic"
        assert config.generation.temperature == 0.2

    def test_default_api_keys_are_none(self) -> None:
        config = AppConfig()
        assert config.anthropic_api_key is None
        assert config.openai_api_key is None


class TestSegmentationConfigValidation:
    def test_pattern_without_group_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SegmentationConfig(heading_pattern=r"^==.*==$")

    def test_invalid_regex_rejected(self) -> None:
        with pytest.raises(ValidationError, match="not a valid regular expression"):
            SegmentationConfig(heading_pattern=r"^==(.+==$")

    def test_overlap_must_be_below_budget(self) -> None:
        with pytest.raises(ValidationError):
            SegmentationConfig(max_chunk_chars=100, chunk_overlap_chars=100)

    def test_non_positive_budget_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SegmentationConfig(max_chunk_chars=0)

    def test_sub_chunking_can_be_disabled(self) -> None:
        config = SegmentationConfig(max_chunk_chars=None, chunk_overlap_chars=10_000)
        assert config.max_chunk_chars is None

    def test_markdown_pattern_accepted(self) -> None:
        config = SegmentationConfig(heading_pattern=MARKDOWN_HEADING_PATTERN)
        assert config.heading_pattern == MARKDOWN_HEADING_PATTERN


class TestLoadConfig:
    """Test loading config from YAML files."""

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        yaml_data = {
            "app": {"name": "Test App", "version": "0.1.0"},
            "retrieval": {"top_k": 10},
            "segmentation": {"max_chunk_chars": None},
        }
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(yaml_data))

        config = load_config(config_file)
        assert config.app.name == "Test App"
        assert config.app.version == "0.1.0"
        assert config.retrieval.top_k == 10
        assert config.segmentation.max_chunk_chars is None
        # Other fields keep defaults
        assert config.embedding.model == "text-embedding-3-small"

    def test_load_missing_yaml_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.app.name == "Landmark RAG"

    def test_env_vars_set_api_keys(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("{}")

        monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key-123")
        monkeypatch.setenv("OPENAI_API_KEY", "test-openai-456")

        config = load_config(config_file)
        assert config.anthropic_api_key == "test-key-123"
        assert config.openai_api_key == "test-openai-456"

    def test_load_project_config_yaml(self) -> None:
        """Test loading the actual project config.yaml."""
        config = load_config(Path(__file__).parent.parent / "config.yaml")
        assert config.app.name == "Landmark RAG"
        assert config.storage.sqlite_path == "./db/chunks.db"
        assert config.segmentation.heading_pattern == WIKI_HEADING_PATTERN
