"""
Document Store - the ingestion and query pipeline.

Write path:
    documents -> (optional) TextSplitter -> EmbeddingService for documents
    without vectors -> batched add/update/upsert into the collection.

Read path:
    query text -> EmbeddingService -> collection query -> typed result.

Batches are written one at a time in input order. Nothing is retried.
"""

import json
from typing import Any, Literal

from loguru import logger

from ragstore.config.models import ChunkingOptions, SearchOptions, WriteOptions
from ragstore.config.settings import Settings
from ragstore.datasource.vdb.base import BaseCollection, BaseVectorClient
from ragstore.datasource.vdb.collection_manager import CollectionManager
from ragstore.embedder.service import EmbeddingService
from ragstore.entities.document import Chunk, Document, chunk_id
from ragstore.entities.search_result import (
    CollectionInfo,
    GetResult,
    QueryResult,
    SimilaritySearchResult,
)
from ragstore.errors import ErrorKind, StoreError
from ragstore.index_processor.splitter.text_splitter import TextSplitter
from ragstore.utils.metadata import sanitize_metadata
from ragstore.utils.performance import timer
from ragstore.utils.validation import validate_collection_name

WriteOperation = Literal["add", "update", "upsert"]

RELATIONSHIP_RECORD_TYPE = "chunk_relationship"


def relationship_record_id(parent_id: str) -> str:
    return f"{parent_id}-relationships"


class DocumentStore:
    """
    Orchestrates chunking, embedding and storage of documents.

    Usage:
        settings = load_settings()
        store = DocumentStore.from_settings(settings)
        await store.create_collection("notes", get_or_create=True)
        await store.add_documents(
            "notes",
            [Document(id="readme", content=text)],
            WriteOptions(auto_chunk=True),
        )
        hits = await store.similarity_search("notes", "how do I configure it?", limit=5)
    """

    def __init__(
        self,
        client: BaseVectorClient,
        embedding_service: EmbeddingService | None = None,
        text_splitter: TextSplitter | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or Settings()
        self.client = client
        self.collections = CollectionManager(client)
        self.embedding_service = embedding_service or EmbeddingService()
        self.text_splitter = text_splitter or TextSplitter.from_settings(self.settings)
        self.default_batch_size = self.settings.DEFAULT_BATCH_SIZE

    @classmethod
    def from_settings(cls, settings: Settings) -> "DocumentStore":
        """Build a Chroma-backed store with the provider chosen by the settings."""
        from ragstore.datasource.vdb.chroma import ChromaVectorClient

        embedding_service = EmbeddingService(settings.embedding_config())
        return cls(
            ChromaVectorClient.from_settings(settings),
            embedding_service=embedding_service,
            settings=settings,
        )

    # ==================== Collection pass-throughs ====================

    async def create_collection(
        self, name: str, metadata: dict[str, Any] | None = None, get_or_create: bool = False
    ) -> BaseCollection:
        return await self.collections.create_collection(name, metadata, get_or_create)

    async def get_collection(self, name: str) -> BaseCollection:
        return await self.collections.get_collection(name)

    async def get_or_create_collection(self, name: str, metadata: dict[str, Any] | None = None) -> BaseCollection:
        return await self.collections.get_or_create_collection(name, metadata)

    async def delete_collection(self, name: str) -> None:
        await self.collections.delete_collection(name)

    async def collection_exists(self, name: str) -> bool:
        return await self.collections.collection_exists(name)

    async def list_collections(self) -> list[CollectionInfo]:
        return await self.collections.list_collections()

    async def reset_collection(self, name: str, metadata: dict[str, Any] | None = None) -> BaseCollection:
        return await self.collections.reset_collection(name, metadata)

    # ==================== Write path ====================

    async def add_documents(
        self, collection_name: str, documents: list[Document], options: WriteOptions | None = None
    ) -> None:
        await self._write("add", collection_name, documents, options)

    async def update_documents(
        self, collection_name: str, documents: list[Document], options: WriteOptions | None = None
    ) -> None:
        await self._write("update", collection_name, documents, options)

    async def upsert_documents(
        self, collection_name: str, documents: list[Document], options: WriteOptions | None = None
    ) -> None:
        """Insert or replace documents; idempotence is provided by the store."""
        await self._write("upsert", collection_name, documents, options)

    async def _write(
        self,
        operation: WriteOperation,
        collection_name: str,
        documents: list[Document],
        options: WriteOptions | None,
    ) -> None:
        options = options or WriteOptions()
        validate_collection_name(collection_name)
        if not documents:
            logger.debug(f"No documents to {operation} in '{collection_name}'")
            return

        collection = await self.collections.get_collection(collection_name)

        records = list(documents)
        chunk_ids: dict[str, list[str]] = {}
        if options.auto_chunk:
            records, chunk_ids = self._chunk_documents(records, options)

        records = await self._embed_missing(records)
        batch_size = options.batch_size or self.default_batch_size
        batches = [
            self._batch_columns(records[start:start + batch_size])
            for start in range(0, len(records), batch_size)
        ]

        write = getattr(collection, operation)
        with timer(f"{operation} {len(records)} documents into '{collection_name}'"):
            for batch_num, columns in enumerate(batches, 1):
                logger.debug(
                    f"[{collection_name}] {operation} batch {batch_num}/{len(batches)} "
                    f"({len(columns['ids'])} documents)"
                )
                await write(**columns)

        if options.preserve_chunk_relationships and chunk_ids:
            relationship_records = [
                self._relationship_record(parent_id, ids) for parent_id, ids in chunk_ids.items()
            ]
            await self._write(
                operation,
                collection_name,
                relationship_records,
                options.model_copy(update={"auto_chunk": False, "preserve_chunk_relationships": False}),
            )

        logger.info(f"Completed {operation} of {len(records)} documents into '{collection_name}'")

    def _chunk_documents(
        self, documents: list[Document], options: WriteOptions
    ) -> tuple[list[Document], dict[str, list[str]]]:
        """Split each document into chunk documents.

        Returns:
            The chunk documents in input order, and the chunk ids per parent
        """
        chunking = options.chunking or ChunkingOptions()
        records: list[Document] = []
        chunk_ids: dict[str, list[str]] = {}

        with timer(f"Chunking {len(documents)} documents"):
            for doc in documents:
                if not doc.content:
                    records.append(doc)
                    continue

                chunks = self._split_one(doc, chunking, options.chunking_strategy)
                records.extend(chunk.to_document(original_document_id=doc.id) for chunk in chunks)
                chunk_ids[doc.id] = [chunk.id for chunk in chunks]

        logger.debug(f"Chunked {len(documents)} documents into {len(records)} records")
        return records, chunk_ids

    def _split_one(self, doc: Document, chunking: ChunkingOptions, strategy: str | None) -> list[Chunk]:
        try:
            if strategy:
                return self.text_splitter.split_documents(
                    [doc], chunking.model_copy(update={"strategy": strategy})
                )
            return self.text_splitter.smart_split(doc.content, {**doc.metadata, "id": doc.id}, chunking)
        except StoreError:
            raise
        except Exception as e:
            logger.warning(f"Chunking failed for document {doc.id}, storing it unchunked: {e}")
            return [
                Chunk(
                    id=chunk_id(doc.id, 0),
                    content=doc.content,
                    metadata=dict(doc.metadata),
                    embedding=doc.embedding,
                    parent_id=doc.id,
                    chunk_index=0,
                    total_chunks=1,
                )
            ]

    @staticmethod
    def _relationship_record(parent_id: str, chunk_ids: list[str]) -> Document:
        return Document(
            id=relationship_record_id(parent_id),
            content=f"Document {parent_id} split into {len(chunk_ids)} chunks",
            metadata={
                "record_type": RELATIONSHIP_RECORD_TYPE,
                "parent_id": parent_id,
                "total_chunks": len(chunk_ids),
                "chunk_ids": json.dumps(chunk_ids),
            },
        )

    async def _embed_missing(self, documents: list[Document]) -> list[Document]:
        """Embed documents that have content but no vector.

        Documents that already carry a vector are never re-embedded. Empty
        content is embedded like any other text.
        """
        pending = [i for i, doc in enumerate(documents) if doc.embedding is None and doc.content is not None]
        if not pending:
            return documents

        if not self.embedding_service.is_configured():
            logger.warning(
                f"{len(pending)} documents have no embedding and no embedding provider is configured"
            )
            return documents

        vectors = await self.embedding_service.embed([documents[i].content for i in pending])
        result = list(documents)
        for i, vector in zip(pending, vectors):
            result[i] = documents[i].model_copy(update={"embedding": vector})
        return result

    @staticmethod
    def _batch_columns(batch: list[Document]) -> dict[str, Any]:
        """Turn a batch into the parallel lists the store expects.

        Raises:
            StoreError: VALIDATION if only some documents have content or vectors
        """
        def column(values: list, field: str) -> list | None:
            present = [v is not None for v in values]
            if all(present):
                return values
            if not any(present):
                return None
            raise StoreError.validation(
                f"Either all or none of the documents in a batch must have {field}", field
            )

        metadatas = [sanitize_metadata(doc.metadata) for doc in batch]
        return {
            "ids": [doc.id for doc in batch],
            "documents": column([doc.content for doc in batch], "content"),
            "metadatas": [m or None for m in metadatas] if any(metadatas) else None,
            "embeddings": column([doc.embedding for doc in batch], "embedding"),
        }

    # ==================== Read path ====================

    async def get_documents(
        self,
        collection_name: str,
        ids: list[str] | None = None,
        where: dict[str, Any] | None = None,
        where_document: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        include: list[str] | None = None,
    ) -> GetResult:
        collection = await self.collections.get_collection(collection_name)
        return await collection.get(
            ids=ids,
            where=where or None,
            where_document=where_document or None,
            limit=limit,
            offset=offset,
            include=include,
        )

    async def delete_documents(
        self,
        collection_name: str,
        ids: list[str] | None = None,
        where: dict[str, Any] | None = None,
        where_document: dict[str, Any] | None = None,
    ) -> None:
        if not (ids or where or where_document):
            raise StoreError.validation("delete requires ids, where or where_document")
        collection = await self.collections.get_collection(collection_name)
        await collection.delete(ids=ids, where=where or None, where_document=where_document or None)
        logger.debug(f"Deleted documents from '{collection_name}'")

    async def search_documents(
        self,
        collection_name: str,
        query_texts: list[str] | None = None,
        query_embeddings: list[list[float]] | None = None,
        options: SearchOptions | None = None,
    ) -> QueryResult:
        """Query the collection with vectors, embedding ``query_texts`` when needed.

        Raises:
            StoreError: EMBEDDING_NOT_CONFIGURED for text queries without a
                provider (before the store is contacted)
        """
        options = options or SearchOptions()
        validate_collection_name(collection_name)

        if query_embeddings is None:
            if not query_texts:
                raise StoreError.validation("search requires query_texts or query_embeddings")
            if not self.embedding_service.is_configured():
                raise StoreError.not_configured("Embedding service not configured for text queries")
            query_embeddings = await self.embedding_service.embed(query_texts)

        collection = await self.collections.get_collection(collection_name)
        with timer(f"Query '{collection_name}' ({len(query_embeddings)} queries)"):
            return await collection.query(
                query_embeddings=query_embeddings,
                n_results=options.n_results,
                where=options.where or None,
                where_document=options.where_document or None,
                include=options.include(),
            )

    async def similarity_search(
        self,
        collection_name: str,
        query: str | list[float],
        limit: int = 10,
        where: dict[str, Any] | None = None,
        where_document: dict[str, Any] | None = None,
        include_metadata: bool = True,
        include_documents: bool = True,
        include_distances: bool = True,
    ) -> SimilaritySearchResult:
        """Search with a text or a vector and flatten the first query's results."""
        validate_collection_name(collection_name)
        if isinstance(query, str):
            if not self.embedding_service.is_configured():
                raise StoreError.not_configured("Embedding service not configured for text queries")
            query_embedding = await self.embedding_service.embed_single(query)
        else:
            query_embedding = list(query)

        result = await self.search_documents(
            collection_name,
            query_embeddings=[query_embedding],
            options=SearchOptions(
                n_results=limit,
                where=where,
                where_document=where_document,
                include_metadata=include_metadata,
                include_documents=include_documents,
                include_distances=include_distances,
            ),
        )
        return SimilaritySearchResult.from_query_result(result)

    async def count_documents(self, collection_name: str) -> int:
        return await self.collections.get_collection_count(collection_name)

    async def peek_documents(self, collection_name: str, limit: int = 10) -> GetResult:
        collection = await self.collections.get_collection(collection_name)
        return await collection.peek(limit)

    async def get_collection_metadata(self, collection_name: str) -> dict[str, Any] | None:
        """Collection metadata, or None if the collection does not exist."""
        try:
            collection = await self.collections.get_collection(collection_name)
        except StoreError as e:
            if e.kind is ErrorKind.COLLECTION_NOT_FOUND:
                return None
            raise
        return collection.metadata or None

    async def update_collection_metadata(self, collection_name: str, metadata: dict[str, Any]) -> None:
        await self.collections.modify_collection(collection_name, metadata)

    # ==================== Lifecycle ====================

    async def aclose(self) -> None:
        """Release the embedding provider's HTTP client."""
        await self.embedding_service.aclose()

    async def __aenter__(self) -> "DocumentStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ==================== Health ====================

    async def heartbeat(self) -> int:
        return await self.client.heartbeat()

    async def version(self) -> str:
        return await self.client.version()

    async def is_healthy(self) -> bool:
        try:
            await self.client.heartbeat()
            return True
        except StoreError as e:
            logger.warning(f"Vector store health check failed: {e}")
            return False

    async def health_check(self, collection_name: str | None = None) -> dict[str, Any]:
        """Status report for monitoring; failures are reported, not raised."""
        try:
            report: dict[str, Any] = {
                "status": "up",
                "heartbeat": await self.client.heartbeat(),
                "version": await self.client.version(),
            }
            if collection_name:
                report["collection"] = collection_name
                report["document_count"] = await self.count_documents(collection_name)
            else:
                collections = await self.client.list_collections()
                report["collections"] = {
                    "count": len(collections),
                    "names": [c.name for c in collections],
                }
            return report
        except StoreError as e:
            logger.warning(f"Health check failed: {e}")
            return {"status": "down", "error": e.message, "code": e.code}
