"""Vector store contract.

The orchestration layer talks to a vector store only through these two
async interfaces: a client that manages collections and a collection
handle that stores and queries documents.
"""

from abc import ABC, abstractmethod
from typing import Any

from ragstore.entities.search_result import CollectionInfo, GetResult, QueryResult

Metadata = dict[str, str | int | float | bool]


class BaseCollection(ABC):
    """Abstract handle to one collection.

    Write methods take parallel lists; ``documents``, ``metadatas`` and
    ``embeddings`` are either None or as long as ``ids``. Missing
    collections raise StoreError COLLECTION_NOT_FOUND.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def metadata(self) -> dict[str, Any] | None:
        pass

    @property
    def id(self) -> str | None:
        return None

    @abstractmethod
    async def add(
        self,
        ids: list[str],
        documents: list[str] | None = None,
        metadatas: list[Metadata | None] | None = None,
        embeddings: list[list[float]] | None = None,
    ) -> None:
        """Insert new records."""
        pass

    @abstractmethod
    async def update(
        self,
        ids: list[str],
        documents: list[str] | None = None,
        metadatas: list[Metadata | None] | None = None,
        embeddings: list[list[float]] | None = None,
    ) -> None:
        """Update existing records."""
        pass

    @abstractmethod
    async def upsert(
        self,
        ids: list[str],
        documents: list[str] | None = None,
        metadatas: list[Metadata | None] | None = None,
        embeddings: list[list[float]] | None = None,
    ) -> None:
        """Insert or replace records; repeating a call yields the same state."""
        pass

    @abstractmethod
    async def get(
        self,
        ids: list[str] | None = None,
        where: dict[str, Any] | None = None,
        where_document: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        include: list[str] | None = None,
    ) -> GetResult:
        pass

    @abstractmethod
    async def delete(
        self,
        ids: list[str] | None = None,
        where: dict[str, Any] | None = None,
        where_document: dict[str, Any] | None = None,
    ) -> None:
        pass

    @abstractmethod
    async def query(
        self,
        query_embeddings: list[list[float]],
        n_results: int = 10,
        where: dict[str, Any] | None = None,
        where_document: dict[str, Any] | None = None,
        include: list[str] | None = None,
    ) -> QueryResult:
        """Nearest neighbours for each query vector."""
        pass

    @abstractmethod
    async def peek(self, limit: int = 10) -> GetResult:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass

    @abstractmethod
    async def modify(self, metadata: dict[str, Any] | None = None, name: str | None = None) -> None:
        pass


class BaseVectorClient(ABC):
    """Abstract collection manager of a vector store."""

    @abstractmethod
    async def create_collection(
        self,
        name: str,
        metadata: dict[str, Any] | None = None,
        get_or_create: bool = False,
    ) -> BaseCollection:
        pass

    @abstractmethod
    async def get_collection(self, name: str) -> BaseCollection:
        """Fetch a collection.

        Raises:
            StoreError: COLLECTION_NOT_FOUND if it does not exist
        """
        pass

    @abstractmethod
    async def get_or_create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> BaseCollection:
        pass

    @abstractmethod
    async def delete_collection(self, name: str) -> None:
        pass

    @abstractmethod
    async def list_collections(self) -> list[CollectionInfo]:
        pass

    @abstractmethod
    async def heartbeat(self) -> int:
        """Server heartbeat (nanoseconds since epoch)."""
        pass

    @abstractmethod
    async def version(self) -> str:
        pass
