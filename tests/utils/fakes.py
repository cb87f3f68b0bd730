"""Deterministic embedding fakes shared by the unit tests."""

FAKE_DIMENSION = 8


def fake_vector(text: str, dimension: int = FAKE_DIMENSION) -> list[float]:
    """Bag-of-characters vector; equal texts get equal vectors."""
    values = [0.0] * dimension
    for ch in text:
        values[ord(ch) % dimension] += 1.0
    return values


class RecordingEmbedFunction:
    """Async embed function that remembers every batch it was given."""

    def __init__(self, dimension: int = FAKE_DIMENSION):
        self.dimension = dimension
        self.batches: list[list[str]] = []

    async def __call__(self, texts: list[str]) -> list[list[float]]:
        self.batches.append(list(texts))
        return [fake_vector(t, self.dimension) for t in texts]

    @property
    def texts(self) -> list[str]:
        return [t for batch in self.batches for t in batch]
