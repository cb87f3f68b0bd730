"""Vector store access and the document store pipeline."""

from .document_store import DocumentStore
from .vdb import BaseCollection, BaseVectorClient, ChromaVectorClient, CollectionManager

__all__ = [
    "BaseCollection",
    "BaseVectorClient",
    "ChromaVectorClient",
    "CollectionManager",
    "DocumentStore",
]
