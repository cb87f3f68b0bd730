from .character import CharacterChunker
from .markdown import MarkdownChunker
from .recursive_character import RecursiveCharacterChunker, SemanticChunker
from .token import TokenChunker

__all__ = [
    "CharacterChunker",
    "MarkdownChunker",
    "RecursiveCharacterChunker",
    "SemanticChunker",
    "TokenChunker",
]
