"""Base chunker interface."""

from abc import ABC, abstractmethod

from ragstore.utils.validation import validate_chunking


class BaseChunker(ABC):
    """Abstract base class for text chunking strategies.

    A chunker turns one text into an ordered list of chunk strings no longer
    than ``chunk_size`` (measured by the strategy's own length unit).
    Building Chunk objects, offsets and metadata is left to the TextSplitter.

    Attributes:
        chunk_size: Maximum length of a chunk
        chunk_overlap: Length carried over from the end of one chunk to the next
    """

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200):
        validate_chunking(chunk_size, chunk_overlap)
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    @abstractmethod
    def split_text(self, text: str) -> list[str]:
        """Split text into chunks.

        Args:
            text: Text to split

        Returns:
            Chunk strings in document order
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(chunk_size={self.chunk_size}, chunk_overlap={self.chunk_overlap})"
