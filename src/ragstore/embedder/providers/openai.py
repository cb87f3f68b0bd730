import httpx

from ragstore.config.models import OpenAIConfig
from ragstore.errors import StoreError

from ..base import HTTPEmbeddingProvider


class OpenAIEmbeddingProvider(HTTPEmbeddingProvider):
    """OpenAI embeddings API (``POST {base_url}/embeddings``)."""

    name = "openai"
    DEFAULT_MODEL = "text-embedding-ada-002"
    DIMENSION = 1536
    DEFAULT_BATCH_SIZE = 100

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        organization: str | None = None,
        base_url: str = "https://api.openai.com/v1",
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
        self.organization = organization
        self.api_url = f"{base_url.rstrip('/')}/embeddings"

    @classmethod
    def from_config(cls, config: OpenAIConfig, client: httpx.AsyncClient | None = None) -> "OpenAIEmbeddingProvider":
        return cls(
            api_key=config.api_key,
            model=config.model,
            organization=config.organization,
            base_url=config.base_url,
            batch_size=config.batch_size,
            timeout=config.timeout,
            client=client,
        )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        return headers

    async def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        data = await self._post(self.api_url, {"input": texts, "model": self.model})
        try:
            # Results may come back out of order; "index" is authoritative
            items = sorted(data["data"], key=lambda item: item["index"])
            return [item["embedding"] for item in items]
        except (KeyError, TypeError) as e:
            raise StoreError.embedding("Unexpected OpenAI response shape", self.name, e) from e
