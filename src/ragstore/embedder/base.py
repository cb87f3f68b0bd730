"""Base embedding provider interface."""

from abc import ABC, abstractmethod

import httpx
from loguru import logger
from pydantic import BaseModel

from ragstore.errors import ErrorKind, StoreError, classify_http_error, wrap_exception


class ProviderInfo(BaseModel):
    name: str
    dimension: int
    batch_size: int
    model: str | None = None

    model_config = {"frozen": True}


class BaseEmbeddingProvider(ABC):
    """Abstract base class for embedding providers.

    Providers convert text strings into vectors of a fixed ``dimension``.
    Input is sent in consecutive batches of ``batch_size``, one request at
    a time, and every batch is validated before the next is sent.

    Attributes:
        name: Provider identifier used in logs and errors
        dimension: Length of every vector this provider returns
        batch_size: Maximum number of texts per provider call
        model: Model name, if the provider has one
    """

    name: str = "base"

    def __init__(self, dimension: int, batch_size: int, model: str | None = None):
        self.dimension = dimension
        self.batch_size = batch_size
        self.model = model

    @abstractmethod
    async def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed one batch (at most ``batch_size`` texts) with a single call."""
        pass

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts.

        Args:
            texts: List of text strings to embed

        Returns:
            List of embedding vectors (same order as input)

        Raises:
            StoreError: If the provider fails or returns malformed vectors
        """
        if not texts:
            return []

        embeddings: list[list[float]] = []
        total_batches = (len(texts) + self.batch_size - 1) // self.batch_size
        for batch_num, start in enumerate(range(0, len(texts), self.batch_size), 1):
            batch = texts[start:start + self.batch_size]
            logger.debug(f"[{self.name}] Embedding batch {batch_num}/{total_batches} ({len(batch)} texts)")
            try:
                vectors = await self._embed_batch(batch)
            except StoreError:
                raise
            except Exception as e:
                logger.error(f"{self.name} embedding failed: {e}")
                raise wrap_exception(
                    e,
                    f"{self.name} embedding failed",
                    {"provider": self.name},
                    default_kind=ErrorKind.EMBEDDING,
                ) from e
            self.validate_dimensions(vectors, len(batch))
            embeddings.extend(vectors)

        return embeddings

    async def embed_single(self, text: str) -> list[float]:
        return (await self.embed([text]))[0]

    def validate_dimensions(self, embeddings: list[list[float]], expected_count: int) -> None:
        """Check vector count and length.

        Raises:
            StoreError: EMBEDDING on any mismatch; vectors are never truncated or padded
        """
        if not isinstance(embeddings, list):
            raise StoreError.embedding(
                f"Expected a list of embeddings, got {type(embeddings).__name__}",
                self.name,
            )
        if len(embeddings) != expected_count:
            raise StoreError.embedding(
                f"Expected {expected_count} embeddings, got {len(embeddings)}",
                self.name,
            )
        for i, embedding in enumerate(embeddings):
            if not isinstance(embedding, list):
                raise StoreError.embedding(
                    f"Embedding {i} is {type(embedding).__name__}, expected a list of floats",
                    self.name,
                    index=i,
                )
            if len(embedding) != self.dimension:
                raise StoreError.embedding(
                    f"Embedding {i} has dimension {len(embedding)}, expected {self.dimension}",
                    self.name,
                    index=i,
                )

    @property
    def info(self) -> ProviderInfo:
        return ProviderInfo(
            name=self.name,
            dimension=self.dimension,
            batch_size=self.batch_size,
            model=self.model,
        )

    async def aclose(self) -> None:
        """Release provider resources."""


class HTTPEmbeddingProvider(BaseEmbeddingProvider):
    """Provider reached through one JSON POST per batch.

    An ``httpx.AsyncClient`` may be injected (tests use ``MockTransport``);
    otherwise one is created with the configured timeout and owned here.
    """

    def __init__(
        self,
        dimension: int,
        batch_size: int,
        model: str | None = None,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(dimension, batch_size, model)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    async def _post(self, url: str, payload: dict) -> object:
        """POST ``payload`` and return the decoded JSON body.

        Raises:
            StoreError: TIMEOUT, CONNECTION, RATE_LIMIT or the status-based kind
        """
        context = {"provider": self.name}
        try:
            response = await self._client.post(url, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error(f"{self.name} API request timed out: {e}")
            raise StoreError(ErrorKind.TIMEOUT, f"{self.name} API request timed out", context, e) from e
        except httpx.RequestError as e:
            logger.error(f"{self.name} API request failed (network error): {e}")
            raise StoreError(ErrorKind.CONNECTION, f"{self.name} API request failed: {e}", context, e) from e

        if response.status_code >= 400:
            logger.error(f"{self.name} API returned error status {response.status_code}: {response.text}")
            raise classify_http_error(
                response.status_code,
                f"{self.name} API error: {response.text}",
                dict(response.headers),
                context,
            )

        try:
            return response.json()
        except ValueError as e:
            raise StoreError.embedding(f"Failed to parse {self.name} API response", self.name, e) from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
