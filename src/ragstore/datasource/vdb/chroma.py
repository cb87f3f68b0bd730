"""
Chroma implementation of the vector store contract.

chromadb's client is synchronous; every call is pushed to a worker thread
with ``asyncio.to_thread`` so the event loop is never blocked. chromadb
failures are translated into StoreError kinds:

- "does not exist" / NotFoundError -> COLLECTION_NOT_FOUND
- transport failures -> CONNECTION
- anything else -> the operation's kind (COLLECTION, DOCUMENT, SEARCH)
"""

import asyncio
from typing import Any, Callable, TypeVar

import chromadb
from chromadb.api import ClientAPI
from chromadb.config import Settings as ChromaSettings
from loguru import logger

from ragstore.config.settings import Settings
from ragstore.entities.search_result import CollectionInfo, GetResult, QueryResult
from ragstore.errors import ErrorKind, StoreError, wrap_exception

from .base import BaseCollection, BaseVectorClient, Metadata

T = TypeVar("T")

_NOT_FOUND_TYPES = ("NotFoundError", "InvalidCollectionException")


def is_not_found(error: BaseException) -> bool:
    return type(error).__name__ in _NOT_FOUND_TYPES or "does not exist" in str(error).lower()


def translate_error(
    error: BaseException,
    message: str,
    kind: ErrorKind,
    collection_name: str | None = None,
) -> StoreError:
    """Map a chromadb failure onto a StoreError."""
    if isinstance(error, StoreError):
        return error
    if is_not_found(error) and collection_name is not None:
        return StoreError.collection_not_found(collection_name, cause=error)
    return wrap_exception(error, message, {"collection_name": collection_name}, default_kind=kind)


def _plain(value: Any) -> Any:
    """Convert numpy arrays (newer chromadb returns them) to lists."""
    if value is None:
        return None
    if hasattr(value, "tolist"):
        return value.tolist()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class ChromaCollection(BaseCollection):
    """Async facade over a ``chromadb`` collection."""

    def __init__(self, collection):
        self._collection = collection

    @property
    def name(self) -> str:
        return self._collection.name

    @property
    def metadata(self) -> dict[str, Any] | None:
        return self._collection.metadata

    @property
    def id(self) -> str | None:
        return str(self._collection.id) if getattr(self._collection, "id", None) else None

    async def _call(self, func: Callable[..., T], kind: ErrorKind, action: str, **kwargs) -> T:
        try:
            return await asyncio.to_thread(func, **kwargs)
        except Exception as e:
            logger.error(f"Failed to {action} in collection '{self.name}': {e}")
            raise translate_error(e, f"Failed to {action}", kind, self.name) from e

    async def _write(self, method: Callable, action: str, ids, documents, metadatas, embeddings) -> None:
        await self._call(
            method,
            ErrorKind.DOCUMENT,
            action,
            ids=ids,
            documents=documents,
            metadatas=metadatas,
            embeddings=embeddings,
        )

    async def add(
        self,
        ids: list[str],
        documents: list[str] | None = None,
        metadatas: list[Metadata | None] | None = None,
        embeddings: list[list[float]] | None = None,
    ) -> None:
        await self._write(self._collection.add, "add documents", ids, documents, metadatas, embeddings)

    async def update(
        self,
        ids: list[str],
        documents: list[str] | None = None,
        metadatas: list[Metadata | None] | None = None,
        embeddings: list[list[float]] | None = None,
    ) -> None:
        await self._write(self._collection.update, "update documents", ids, documents, metadatas, embeddings)

    async def upsert(
        self,
        ids: list[str],
        documents: list[str] | None = None,
        metadatas: list[Metadata | None] | None = None,
        embeddings: list[list[float]] | None = None,
    ) -> None:
        await self._write(self._collection.upsert, "upsert documents", ids, documents, metadatas, embeddings)

    async def get(
        self,
        ids: list[str] | None = None,
        where: dict[str, Any] | None = None,
        where_document: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        include: list[str] | None = None,
    ) -> GetResult:
        raw = await self._call(
            self._collection.get,
            ErrorKind.DOCUMENT,
            "get documents",
            ids=ids,
            where=where,
            where_document=where_document,
            limit=limit,
            offset=offset,
            include=include or ["metadatas", "documents"],
        )
        return self._get_result(raw)

    async def delete(
        self,
        ids: list[str] | None = None,
        where: dict[str, Any] | None = None,
        where_document: dict[str, Any] | None = None,
    ) -> None:
        await self._call(
            self._collection.delete,
            ErrorKind.DOCUMENT,
            "delete documents",
            ids=ids,
            where=where,
            where_document=where_document,
        )

    async def query(
        self,
        query_embeddings: list[list[float]],
        n_results: int = 10,
        where: dict[str, Any] | None = None,
        where_document: dict[str, Any] | None = None,
        include: list[str] | None = None,
    ) -> QueryResult:
        raw = await self._call(
            self._collection.query,
            ErrorKind.SEARCH,
            "query",
            query_embeddings=query_embeddings,
            n_results=n_results,
            where=where,
            where_document=where_document,
            include=include or ["metadatas", "documents", "distances"],
        )
        return QueryResult(
            ids=_plain(raw.get("ids")) or [],
            documents=_plain(raw.get("documents")),
            metadatas=_plain(raw.get("metadatas")),
            distances=_plain(raw.get("distances")),
            embeddings=_plain(raw.get("embeddings")),
        )

    async def peek(self, limit: int = 10) -> GetResult:
        raw = await self._call(self._collection.peek, ErrorKind.DOCUMENT, "peek", limit=limit)
        return self._get_result(raw)

    async def count(self) -> int:
        return await self._call(self._collection.count, ErrorKind.COLLECTION, "count documents")

    async def modify(self, metadata: dict[str, Any] | None = None, name: str | None = None) -> None:
        await self._call(
            self._collection.modify,
            ErrorKind.COLLECTION,
            "modify collection",
            metadata=metadata,
            name=name,
        )

    @staticmethod
    def _get_result(raw) -> GetResult:
        return GetResult(
            ids=_plain(raw.get("ids")) or [],
            documents=_plain(raw.get("documents")),
            metadatas=_plain(raw.get("metadatas")),
            embeddings=_plain(raw.get("embeddings")),
        )


class ChromaVectorClient(BaseVectorClient):
    """
    Chroma Vector Store client.

    Wraps any chromadb ``ClientAPI`` (persistent, HTTP or ephemeral).
    """

    def __init__(self, client: ClientAPI, embedding_function: Any | None = None):
        self._client = client
        self._embedding_function = embedding_function

    @classmethod
    def persistent(cls, path: str, **kwargs) -> "ChromaVectorClient":
        return cls(chromadb.PersistentClient(path=path, settings=ChromaSettings(anonymized_telemetry=False)), **kwargs)

    @classmethod
    def http(cls, host: str, port: int = 8000, ssl: bool = False, **kwargs) -> "ChromaVectorClient":
        return cls(
            chromadb.HttpClient(host=host, port=port, ssl=ssl, settings=ChromaSettings(anonymized_telemetry=False)),
            **kwargs,
        )

    @classmethod
    def ephemeral(cls, **kwargs) -> "ChromaVectorClient":
        return cls(chromadb.EphemeralClient(settings=ChromaSettings(anonymized_telemetry=False)), **kwargs)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ChromaVectorClient":
        """HTTP client when CHROMA_HOST is set, else a persistent client at CHROMA_DB_PATH."""
        try:
            if settings.CHROMA_HOST:
                logger.info(f"Connecting to ChromaDB at {settings.CHROMA_HOST}:{settings.CHROMA_PORT}")
                return cls.http(settings.CHROMA_HOST, settings.CHROMA_PORT, settings.CHROMA_SSL, **kwargs)
            logger.info(f"Opening persistent ChromaDB at {settings.CHROMA_DB_PATH}")
            return cls.persistent(settings.CHROMA_DB_PATH, **kwargs)
        except Exception as e:
            raise wrap_exception(e, "Failed to connect to ChromaDB", default_kind=ErrorKind.CONNECTION) from e

    def _collection_kwargs(self) -> dict[str, Any]:
        if self._embedding_function is None:
            return {}
        return {"embedding_function": self._embedding_function}

    async def _call(
        self,
        func: Callable[..., T],
        kind: ErrorKind,
        action: str,
        collection_name: str | None = None,
        **kwargs,
    ) -> T:
        try:
            return await asyncio.to_thread(func, **kwargs)
        except Exception as e:
            logger.error(f"Failed to {action}: {e}")
            raise translate_error(e, f"Failed to {action}", kind, collection_name) from e

    async def create_collection(
        self,
        name: str,
        metadata: dict[str, Any] | None = None,
        get_or_create: bool = False,
    ) -> BaseCollection:
        collection = await self._call(
            self._client.create_collection,
            ErrorKind.COLLECTION,
            f"create collection '{name}'",
            None,
            name=name,
            # chromadb rejects an empty metadata dict
            metadata=metadata or None,
            get_or_create=get_or_create,
            **self._collection_kwargs(),
        )
        return ChromaCollection(collection)

    async def get_collection(self, name: str) -> BaseCollection:
        collection = await self._call(
            self._client.get_collection,
            ErrorKind.COLLECTION,
            f"get collection '{name}'",
            name,
            name=name,
            **self._collection_kwargs(),
        )
        return ChromaCollection(collection)

    async def get_or_create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> BaseCollection:
        collection = await self._call(
            self._client.get_or_create_collection,
            ErrorKind.COLLECTION,
            f"get or create collection '{name}'",
            None,
            name=name,
            metadata=metadata or None,
            **self._collection_kwargs(),
        )
        return ChromaCollection(collection)

    async def delete_collection(self, name: str) -> None:
        await self._call(
            self._client.delete_collection, ErrorKind.COLLECTION, f"delete collection '{name}'", name, name=name
        )

    async def list_collections(self) -> list[CollectionInfo]:
        collections = await self._call(self._client.list_collections, ErrorKind.COLLECTION, "list collections")
        infos = []
        for item in collections:
            # chromadb 0.6 returns names, other versions return collection objects
            if isinstance(item, str):
                infos.append(CollectionInfo(name=item))
            else:
                infos.append(
                    CollectionInfo(
                        name=item.name,
                        id=str(item.id) if getattr(item, "id", None) else None,
                        metadata=item.metadata,
                    )
                )
        return infos

    async def heartbeat(self) -> int:
        return await self._call(self._client.heartbeat, ErrorKind.CONNECTION, "reach ChromaDB")

    async def version(self) -> str:
        return await self._call(self._client.get_version, ErrorKind.CONNECTION, "read ChromaDB version")
