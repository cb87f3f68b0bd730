from .base import BaseChunker
from .factory import ChunkerFactory
from .text_splitter import TextSplitter

__all__ = ["BaseChunker", "ChunkerFactory", "TextSplitter"]
