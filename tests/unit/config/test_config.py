"""Tests for configuration models and settings loading."""

import pytest
from pydantic import TypeAdapter, ValidationError

from ragstore.config import (
    ChunkingOptions,
    CohereConfig,
    CustomConfig,
    EmbeddingConfig,
    HuggingFaceConfig,
    OpenAIConfig,
    SearchOptions,
    Settings,
    WriteOptions,
    load_settings,
)


async def _embed(texts):
    return [[0.0] for _ in texts]


class TestEmbeddingConfig:

    def test_discriminated_union(self):
        adapter = TypeAdapter(EmbeddingConfig)

        config = adapter.validate_python({"provider": "cohere", "api_key": "k"})
        assert isinstance(config, CohereConfig)
        assert config.base_url == "https://api.cohere.ai/v1"

        config = adapter.validate_python({"provider": "huggingface"})
        assert isinstance(config, HuggingFaceConfig)
        assert config.api_key is None

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(EmbeddingConfig).validate_python({"provider": "word2vec"})

    def test_openai_requires_api_key(self):
        with pytest.raises(ValidationError):
            OpenAIConfig()

    def test_custom_dimension_must_be_positive(self):
        with pytest.raises(ValidationError):
            CustomConfig(embed_fn=_embed, dimension=0)

        config = CustomConfig(embed_fn=_embed, dimension=3)
        assert config.batch_size == 100
        assert config.name == "custom"

    def test_configs_are_frozen(self):
        config = OpenAIConfig(api_key="k")
        with pytest.raises(ValidationError):
            config.api_key = "other"


class TestOptions:

    def test_unset_extraction_flags_are_disabled(self):
        options = ChunkingOptions().extraction_options("markdown")
        assert options.content_type == "markdown"
        assert not options.extract_topics
        assert not options.extract_keywords
        assert not options.analyze_complexity

    def test_extraction_flags_pass_through(self):
        options = ChunkingOptions(extract_keywords=True).extraction_options()
        assert options.extract_keywords
        assert not options.extract_topics

    def test_chunk_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            ChunkingOptions(chunk_size=0)

    def test_search_include(self):
        assert SearchOptions().include() == ["metadatas", "documents", "distances"]
        options = SearchOptions(include_documents=False, include_embeddings=True)
        assert options.include() == ["metadatas", "distances", "embeddings"]

    def test_write_defaults(self):
        options = WriteOptions()
        assert options.auto_chunk is False
        assert options.batch_size is None
        assert options.preserve_chunk_relationships is False


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        assert settings.CHROMA_PORT == 8000
        assert settings.DEFAULT_BATCH_SIZE == 100
        assert settings.EMBEDDING_CHUNK_SIZE == 1000
        assert settings.embedding_config() is None

    def test_embedding_config_precedence(self):
        settings = Settings(COHERE_API_KEY="co", HUGGINGFACE_API_KEY="hf", EMBEDDING_TIMEOUT=5)
        config = settings.embedding_config()
        assert isinstance(config, CohereConfig)
        assert config.timeout == 5

        settings = Settings(OPENAI_API_KEY="sk", COHERE_API_KEY="co")
        assert isinstance(settings.embedding_config(), OpenAIConfig)

        settings = Settings(HUGGINGFACE_API_KEY="hf")
        assert isinstance(settings.embedding_config(), HuggingFaceConfig)

    def test_load_settings_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CHROMA_HOST", "chroma.local")
        monkeypatch.setenv("CHROMA_PORT", "9000")
        monkeypatch.setenv("CHROMA_SSL", "true")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("DEFAULT_BATCH_SIZE", "25")

        settings = load_settings(tmp_path / "missing.env")

        assert settings.CHROMA_HOST == "chroma.local"
        assert settings.CHROMA_PORT == 9000
        assert settings.CHROMA_SSL is True
        assert settings.DEFAULT_BATCH_SIZE == 25
        assert isinstance(settings.embedding_config(), OpenAIConfig)

    def test_load_settings_reads_env_file(self, monkeypatch, tmp_path):
        # setenv then delenv so monkeypatch removes whatever load_dotenv sets
        monkeypatch.setenv("EMBEDDING_CHUNK_SIZE", "1")
        monkeypatch.delenv("EMBEDDING_CHUNK_SIZE")
        env_file = tmp_path / ".env"
        env_file.write_text("EMBEDDING_CHUNK_SIZE=750\n")

        settings = load_settings(env_file)

        assert settings.EMBEDDING_CHUNK_SIZE == 750

    def test_settings_are_frozen(self):
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.CHROMA_PORT = 1
