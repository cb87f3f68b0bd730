"""Token-window chunker backed by tiktoken."""

import tiktoken
from loguru import logger

from ..base import BaseChunker


class TokenChunker(BaseChunker):
    """Splits text into windows of ``chunk_size`` tokens.

    Consecutive windows start ``chunk_size - chunk_overlap`` tokens apart,
    so sizes and overlap are measured in tokens, not characters.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        encoding_name: str = "cl100k_base",
    ):
        super().__init__(chunk_size, chunk_overlap)
        self.encoding_name = encoding_name
        # cl100k_base is the GPT-4 / ada-002 encoding
        self.encoder = tiktoken.get_encoding(encoding_name)

    def split_text(self, text: str) -> list[str]:
        tokens = self.encoder.encode(text, disallowed_special=())
        step = self.chunk_size - self.chunk_overlap

        chunks = []
        start = 0
        while start < len(tokens):
            end = min(start + self.chunk_size, len(tokens))
            chunks.append(self.encoder.decode(tokens[start:end]))
            if end == len(tokens):
                break
            start += step

        logger.debug(f"Token split: {len(tokens)} tokens -> {len(chunks)} chunks ({self.encoding_name})")
        return chunks
