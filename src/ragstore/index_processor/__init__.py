"""Chunking and metadata extraction."""

from .metadata import MetadataExtractor
from .splitter import ChunkerFactory, TextSplitter

__all__ = ["ChunkerFactory", "MetadataExtractor", "TextSplitter"]
