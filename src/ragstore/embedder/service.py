"""Embedding service managing a single configured provider."""

import httpx
from loguru import logger

from ragstore.config.models import EmbeddingConfig
from ragstore.errors import StoreError
from ragstore.utils.performance import timer

from .base import BaseEmbeddingProvider, ProviderInfo
from .factory import EmbedderFactory


class EmbeddingService:
    """Front door for embedding generation.

    The service may exist without a provider (for stores that only receive
    precomputed vectors). In that state ``is_configured()`` is False and
    every embedding call raises EMBEDDING_NOT_CONFIGURED instead of
    returning empty vectors.

    Usage:
        service = EmbeddingService(OpenAIConfig(api_key="sk-..."))
        vectors = await service.embed(["first text", "second text"])
    """

    def __init__(
        self,
        config: EmbeddingConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._provider: BaseEmbeddingProvider | None = None
        self._client = client
        if config is not None:
            self.initialize(config)

    def initialize(self, config: EmbeddingConfig | None) -> None:
        """Create the provider for ``config``; None leaves the service unconfigured."""
        if config is None:
            logger.warning("No embedding provider configured")
            return

        self._provider = EmbedderFactory.create(config, client=self._client)
        logger.info(f"Initialized {config.provider} embedding provider")

    @classmethod
    def from_provider(cls, provider: BaseEmbeddingProvider) -> "EmbeddingService":
        service = cls()
        service._provider = provider
        return service

    def is_configured(self) -> bool:
        return self._provider is not None

    def _require_provider(self) -> BaseEmbeddingProvider:
        if self._provider is None:
            raise StoreError.not_configured()
        return self._provider

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed texts in provider-sized batches, in input order.

        Raises:
            StoreError: EMBEDDING_NOT_CONFIGURED without a provider, or the
                provider's failure
        """
        provider = self._require_provider()
        if not texts:
            return []

        with timer(f"Embedding {len(texts)} texts with {provider.name}"):
            return await provider.embed(texts)

    async def embed_single(self, text: str) -> list[float]:
        provider = self._require_provider()
        return await provider.embed_single(text)

    def get_dimension(self) -> int:
        return self._require_provider().dimension

    def get_model(self) -> str | None:
        return self._provider.model if self._provider else None

    def get_provider_info(self) -> ProviderInfo | None:
        return self._provider.info if self._provider else None

    async def aclose(self) -> None:
        if self._provider is not None:
            await self._provider.aclose()
