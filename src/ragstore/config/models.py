"""Configuration models for pipeline components.

This module defines the Pydantic models callers pass in: the embedding
provider union, chunking/extraction options, write and search options,
and collection registration entries.
"""

from typing import Annotated, Any, Awaitable, Callable, Literal, Union

from pydantic import BaseModel, Field

EmbedFunction = Callable[[list[str]], Awaitable[list[list[float]]]]


# =============================================================================
# Embedding providers
# =============================================================================

class _ProviderConfig(BaseModel):
    """Fields shared by the HTTP providers."""

    api_key: str | None = None
    model: str | None = None
    batch_size: int | None = Field(default=None, gt=0)
    timeout: float = Field(default=60.0, gt=0)

    model_config = {"frozen": True}


class OpenAIConfig(_ProviderConfig):
    provider: Literal["openai"] = "openai"
    api_key: str
    organization: str | None = None
    base_url: str = "https://api.openai.com/v1"


class CohereConfig(_ProviderConfig):
    provider: Literal["cohere"] = "cohere"
    api_key: str
    base_url: str = "https://api.cohere.ai/v1"


class HuggingFaceConfig(_ProviderConfig):
    """HuggingFace inference API. ``endpoint`` overrides the model URL."""

    provider: Literal["huggingface"] = "huggingface"
    endpoint: str | None = None


class CustomConfig(BaseModel):
    """Caller-supplied async embedding function."""

    provider: Literal["custom"] = "custom"
    embed_fn: EmbedFunction
    dimension: int = Field(gt=0)
    batch_size: int = Field(default=100, gt=0)
    name: str = "custom"

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


EmbeddingConfig = Annotated[
    Union[OpenAIConfig, CohereConfig, HuggingFaceConfig, CustomConfig],
    Field(discriminator="provider"),
]


# =============================================================================
# Chunking / extraction
# =============================================================================

class ExtractionOptions(BaseModel):
    """Which optional facets the metadata extractor computes.

    Category, headings, content features and confidence are always produced.
    """

    content_type: str | None = None
    extract_topics: bool = True
    extract_keywords: bool = True
    analyze_complexity: bool = True
    calculate_reading_time: bool = True
    detect_cross_references: bool = True
    extract_code_metadata: bool = True


class ChunkingOptions(BaseModel):
    """Options for a split call.

    Unset sizes fall back to the content-type defaults; unset extraction
    flags count as disabled, except in ``smart_split``.

    Attributes:
        strategy: Registered strategy name (recursive, semantic, markdown, character, token)
        chunk_size: Maximum chunk length (characters, or tokens for ``token``)
        chunk_overlap: Overlap carried into the next chunk
        separators: Custom separator list for the separator-based strategies
    """

    strategy: str | None = None
    chunk_size: int | None = Field(default=None, gt=0)
    chunk_overlap: int | None = Field(default=None, ge=0)
    separators: list[str] | None = None

    extract_metadata: bool | None = None
    extract_topics: bool | None = None
    extract_keywords: bool | None = None
    analyze_complexity: bool | None = None
    calculate_reading_time: bool | None = None
    detect_cross_references: bool | None = None
    extract_code_metadata: bool | None = None

    def extraction_options(self, content_type: str | None = None) -> ExtractionOptions:
        return ExtractionOptions(
            content_type=content_type,
            extract_topics=bool(self.extract_topics),
            extract_keywords=bool(self.extract_keywords),
            analyze_complexity=bool(self.analyze_complexity),
            calculate_reading_time=bool(self.calculate_reading_time),
            detect_cross_references=bool(self.detect_cross_references),
            extract_code_metadata=bool(self.extract_code_metadata),
        )


# =============================================================================
# Store operations
# =============================================================================

class WriteOptions(BaseModel):
    """Options for add/update/upsert.

    Attributes:
        auto_chunk: Split documents before writing
        chunking_strategy: Explicit strategy; smart detection when unset
        chunking: Extra chunking options (sizes, separators, extraction flags)
        preserve_chunk_relationships: Also write one relationship record per parent
        batch_size: Documents per store call; the store default when unset
    """

    auto_chunk: bool = False
    chunking_strategy: str | None = None
    chunking: ChunkingOptions | None = None
    preserve_chunk_relationships: bool = False
    batch_size: int | None = Field(default=None, gt=0)


class SearchOptions(BaseModel):
    n_results: int = Field(default=10, gt=0)
    where: dict[str, Any] | None = None
    where_document: dict[str, Any] | None = None
    include_metadata: bool = True
    include_documents: bool = True
    include_distances: bool = True
    include_embeddings: bool = False

    def include(self) -> list[str]:
        """Translate the include flags into the store's include list."""
        flags = [
            (self.include_metadata, "metadatas"),
            (self.include_documents, "documents"),
            (self.include_distances, "distances"),
            (self.include_embeddings, "embeddings"),
        ]
        return [name for enabled, name in flags if enabled]


class CollectionConfig(BaseModel):
    """A collection to register at startup."""

    name: str
    metadata: dict[str, Any] | None = None
    get_or_create: bool = True

