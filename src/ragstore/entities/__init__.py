from .document import Chunk, Document, chunk_id
from .metadata import ComplexityLevel, ContentCategory, ExtractedMetadata, Heading
from .search_result import CollectionInfo, GetResult, QueryResult, SimilaritySearchResult

__all__ = [
    "Chunk",
    "CollectionInfo",
    "ComplexityLevel",
    "ContentCategory",
    "Document",
    "ExtractedMetadata",
    "GetResult",
    "Heading",
    "QueryResult",
    "SimilaritySearchResult",
    "chunk_id",
]
