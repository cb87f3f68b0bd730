from .base import BaseCollection, BaseVectorClient
from .chroma import ChromaCollection, ChromaVectorClient
from .collection_manager import CollectionManager

__all__ = [
    "BaseCollection",
    "BaseVectorClient",
    "ChromaCollection",
    "ChromaVectorClient",
    "CollectionManager",
]
