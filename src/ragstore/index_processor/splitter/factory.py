"""Chunker factory for creating chunking strategies."""

from typing import Any

from loguru import logger

from ragstore.errors import StoreError

from .base import BaseChunker
from .providers.character import CharacterChunker
from .providers.markdown import MarkdownChunker
from .providers.recursive_character import RecursiveCharacterChunker, SemanticChunker
from .providers.token import TokenChunker


class ChunkerFactory:
    """Factory for creating chunker instances based on strategy name.

    This factory maintains a registry of available strategies
    and creates instances based on string identifiers.
    """

    _registry: dict[str, type[BaseChunker]] = {
        "recursive": RecursiveCharacterChunker,
        "semantic": SemanticChunker,
        "markdown": MarkdownChunker,
        "character": CharacterChunker,
        "token": TokenChunker,
    }

    @classmethod
    def create(
        cls,
        strategy: str,
        chunk_size: int,
        chunk_overlap: int,
        separators: list[str] | None = None,
        **params: Any,
    ) -> BaseChunker:
        """Create a chunker instance by strategy name.

        Args:
            strategy: Strategy identifier (e.g., "recursive")
            chunk_size: Maximum chunk size
            chunk_overlap: Overlap between consecutive chunks
            separators: Custom separators; the character strategy uses the first one
            **params: Extra strategy-specific parameters

        Returns:
            Chunker instance

        Raises:
            StoreError: VALIDATION if the strategy is not registered
        """
        if strategy not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise StoreError.validation(
                f"Unknown chunking strategy: '{strategy}'. Available strategies: {available}",
                "strategy",
                strategy,
            )

        chunker_class = cls._registry[strategy]
        if separators:
            if issubclass(chunker_class, RecursiveCharacterChunker):
                params["separators"] = separators
            elif issubclass(chunker_class, CharacterChunker):
                params["separator"] = separators[0]

        logger.debug(f"Creating {chunker_class.__name__} (size={chunk_size}, overlap={chunk_overlap})")
        return chunker_class(chunk_size=chunk_size, chunk_overlap=chunk_overlap, **params)

    @classmethod
    def register(cls, strategy: str, chunker_class: type[BaseChunker]):
        """Register a new chunking strategy.

        Raises:
            TypeError: If chunker_class is not a subclass of BaseChunker
        """
        if not issubclass(chunker_class, BaseChunker):
            raise TypeError(f"{chunker_class.__name__} must be a subclass of BaseChunker")

        cls._registry[strategy] = chunker_class
        logger.info(f"Registered chunking strategy '{strategy}': {chunker_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        return list(cls._registry.keys())
