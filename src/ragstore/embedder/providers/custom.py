from ragstore.config.models import CustomConfig, EmbedFunction

from ..base import BaseEmbeddingProvider


class CustomEmbeddingProvider(BaseEmbeddingProvider):
    """Wraps a caller-supplied ``async (texts) -> vectors`` function."""

    def __init__(
        self,
        embed_fn: EmbedFunction,
        dimension: int,
        batch_size: int = 100,
        name: str = "custom",
    ):
        super().__init__(dimension=dimension, batch_size=batch_size)
        self.embed_fn = embed_fn
        self.name = name

    @classmethod
    def from_config(cls, config: CustomConfig, client=None) -> "CustomEmbeddingProvider":
        return cls(
            embed_fn=config.embed_fn,
            dimension=config.dimension,
            batch_size=config.batch_size,
            name=config.name,
        )

    async def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        return await self.embed_fn(texts)
