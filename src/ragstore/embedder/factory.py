"""Embedder factory for creating embedding providers from config."""

import httpx
from loguru import logger

from ragstore.config.models import EmbeddingConfig
from ragstore.errors import ErrorKind, StoreError

from .base import BaseEmbeddingProvider
from .providers.cohere import CohereEmbeddingProvider
from .providers.custom import CustomEmbeddingProvider
from .providers.huggingface import HuggingFaceEmbeddingProvider
from .providers.openai import OpenAIEmbeddingProvider


class EmbedderFactory:
    """Factory for creating embedding providers based on ``config.provider``.

    This factory maintains a registry of available providers keyed by the
    discriminator of the embedding config union. Each provider class builds
    itself with ``from_config``.
    """

    _registry: dict[str, type[BaseEmbeddingProvider]] = {
        "openai": OpenAIEmbeddingProvider,
        "cohere": CohereEmbeddingProvider,
        "huggingface": HuggingFaceEmbeddingProvider,
        "custom": CustomEmbeddingProvider,
    }

    @classmethod
    def create(
        cls,
        config: EmbeddingConfig,
        client: httpx.AsyncClient | None = None,
    ) -> BaseEmbeddingProvider:
        """Create a provider instance from its config.

        Args:
            config: One member of the EmbeddingConfig union
            client: Optional shared HTTP client for HTTP providers

        Returns:
            Embedding provider instance

        Raises:
            StoreError: CONFIGURATION if the provider is not registered
        """
        provider = getattr(config, "provider", None)
        if provider not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise StoreError(
                ErrorKind.CONFIGURATION,
                f"Unknown embedding provider: '{provider}'. Available providers: {available}",
                {"provider": provider},
            )

        provider_class = cls._registry[provider]
        logger.debug(f"Creating {provider_class.__name__}")
        return provider_class.from_config(config, client=client)

    @classmethod
    def register(cls, provider: str, provider_class: type[BaseEmbeddingProvider]):
        """Register a new provider type.

        The class must implement ``from_config(config, client=None)``.

        Raises:
            TypeError: If provider_class is not a subclass of BaseEmbeddingProvider
        """
        if not issubclass(provider_class, BaseEmbeddingProvider):
            raise TypeError(
                f"{provider_class.__name__} must be a subclass of BaseEmbeddingProvider"
            )

        cls._registry[provider] = provider_class
        logger.info(f"Registered embedding provider '{provider}': {provider_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        """Get list of available provider identifiers."""
        return list(cls._registry.keys())
