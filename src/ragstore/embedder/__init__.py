"""Embedding providers and the embedding service."""

from .base import BaseEmbeddingProvider, HTTPEmbeddingProvider, ProviderInfo
from .factory import EmbedderFactory
from .service import EmbeddingService

__all__ = [
    "BaseEmbeddingProvider",
    "EmbedderFactory",
    "EmbeddingService",
    "HTTPEmbeddingProvider",
    "ProviderInfo",
]
