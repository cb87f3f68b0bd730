"""
ragstore - document ingestion and retrieval on top of a vector store.

Documents are split into chunks, enriched with extracted metadata, embedded
with a pluggable provider and written to a Chroma collection in batches.
"""

__version__ = "0.1.0"

# Configuration
from .config import (
    ChunkingOptions,
    CohereConfig,
    CollectionConfig,
    CustomConfig,
    EmbeddingConfig,
    HuggingFaceConfig,
    OpenAIConfig,
    SearchOptions,
    Settings,
    WriteOptions,
    load_settings,
)

# Storage
from .datasource import BaseCollection, BaseVectorClient, ChromaVectorClient, CollectionManager, DocumentStore

# Embedding
from .embedder import BaseEmbeddingProvider, EmbedderFactory, EmbeddingService

# Entities
from .entities import (
    Chunk,
    CollectionInfo,
    Document,
    ExtractedMetadata,
    GetResult,
    QueryResult,
    SimilaritySearchResult,
)
from .errors import ErrorKind, StoreError

# Processing
from .index_processor import ChunkerFactory, MetadataExtractor, TextSplitter

__all__ = [
    "__version__",
    # Configuration
    "ChunkingOptions",
    "CohereConfig",
    "CollectionConfig",
    "CustomConfig",
    "EmbeddingConfig",
    "HuggingFaceConfig",
    "OpenAIConfig",
    "SearchOptions",
    "Settings",
    "WriteOptions",
    "load_settings",
    # Storage
    "BaseCollection",
    "BaseVectorClient",
    "ChromaVectorClient",
    "CollectionManager",
    "DocumentStore",
    # Embedding
    "BaseEmbeddingProvider",
    "EmbedderFactory",
    "EmbeddingService",
    # Entities
    "Chunk",
    "CollectionInfo",
    "Document",
    "ExtractedMetadata",
    "GetResult",
    "QueryResult",
    "SimilaritySearchResult",
    # Errors
    "ErrorKind",
    "StoreError",
    # Processing
    "ChunkerFactory",
    "MetadataExtractor",
    "TextSplitter",
]
