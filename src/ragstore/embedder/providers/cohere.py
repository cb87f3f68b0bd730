import httpx

from ragstore.config.models import CohereConfig
from ragstore.errors import StoreError

from ..base import HTTPEmbeddingProvider


class CohereEmbeddingProvider(HTTPEmbeddingProvider):
    """
    Cohere embedding provider using the Cohere embed API.
    """

    name = "cohere"
    DEFAULT_MODEL = "embed-english-v2.0"
    DIMENSION = 1024
    DEFAULT_BATCH_SIZE = 96

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str = "https://api.cohere.ai/v1",
        batch_size: int | None = None,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(
            dimension=self.DIMENSION,
            batch_size=batch_size or self.DEFAULT_BATCH_SIZE,
            model=model or self.DEFAULT_MODEL,
            timeout=timeout,
            client=client,
        )
        self.api_key = api_key
        self.api_url = f"{base_url.rstrip('/')}/embed"

    @classmethod
    def from_config(cls, config: CohereConfig, client: httpx.AsyncClient | None = None) -> "CohereEmbeddingProvider":
        return cls(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            batch_size=config.batch_size,
            timeout=config.timeout,
            client=client,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        payload = {
            "texts": texts,
            "model": self.model,
            "truncate": "END",
        }
        data = await self._post(self.api_url, payload)
        try:
            return data["embeddings"]
        except (KeyError, TypeError) as e:
            raise StoreError.embedding("Unexpected Cohere response shape", self.name, e) from e
