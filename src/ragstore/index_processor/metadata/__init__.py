from .extractor import MetadataExtractor

__all__ = ["MetadataExtractor"]
