import httpx

from ragstore.config.models import HuggingFaceConfig
from ragstore.errors import StoreError

from ..base import HTTPEmbeddingProvider

HF_FEATURE_EXTRACTION_URL = "https://api-inference.huggingface.co/pipeline/feature-extraction/{model}"


class HuggingFaceEmbeddingProvider(HTTPEmbeddingProvider):
    """HuggingFace inference API feature-extraction pipeline.

    A single input is sent as a bare string and answered with a flat
    vector; several inputs are sent as a list and answered with a list of
    vectors. Both shapes are normalized to a list of vectors.
    """

    name = "huggingface"
    DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
    DIMENSION = 384  # all-MiniLM-L6-v2 dimension
    DEFAULT_BATCH_SIZE = 50

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        endpoint: str | None = None,
        batch_size: int | None = None,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        model = model or self.DEFAULT_MODEL
        super().__init__(
            dimension=self.DIMENSION,
            batch_size=batch_size or self.DEFAULT_BATCH_SIZE,
            model=model,
            timeout=timeout,
            client=client,
        )
        self.api_key = api_key
        self.endpoint = endpoint or HF_FEATURE_EXTRACTION_URL.format(model=model)

    @classmethod
    def from_config(
        cls, config: HuggingFaceConfig, client: httpx.AsyncClient | None = None
    ) -> "HuggingFaceEmbeddingProvider":
        return cls(
            api_key=config.api_key,
            model=config.model,
            endpoint=config.endpoint,
            batch_size=config.batch_size,
            timeout=config.timeout,
            client=client,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        payload = {
            "inputs": texts[0] if len(texts) == 1 else texts,
            "options": {"wait_for_model": True},
        }
        data = await self._post(self.endpoint, payload)

        if not isinstance(data, list):
            raise StoreError.embedding(f"Unexpected HuggingFace response: {data!r}"[:200], self.name)
        if len(texts) == 1:
            # Flat vector for a single input; some models still nest it
            return [data[0] if data and isinstance(data[0], list) else data]
        return data
