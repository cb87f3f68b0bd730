from .models import (
    ChunkingOptions,
    CohereConfig,
    CollectionConfig,
    CustomConfig,
    EmbeddingConfig,
    ExtractionOptions,
    HuggingFaceConfig,
    OpenAIConfig,
    SearchOptions,
    WriteOptions,
)
from .settings import Settings, load_settings

__all__ = [
    "ChunkingOptions",
    "CohereConfig",
    "CollectionConfig",
    "CustomConfig",
    "EmbeddingConfig",
    "ExtractionOptions",
    "HuggingFaceConfig",
    "OpenAIConfig",
    "SearchOptions",
    "Settings",
    "WriteOptions",
    "load_settings",
]
