"""Collection lifecycle and handle cache."""

import asyncio
from typing import Any

from loguru import logger

from ragstore.config.models import CollectionConfig
from ragstore.entities.search_result import CollectionInfo
from ragstore.errors import ErrorKind, StoreError
from ragstore.utils.metadata import sanitize_metadata
from ragstore.utils.validation import validate_collection_name

from .base import BaseCollection, BaseVectorClient


class CollectionManager:
    """
    Creates, fetches and deletes collections, caching handles by name.

    Names are validated before the store is contacted. The first fetch of
    a name is serialized per name, so concurrent callers share one store
    round-trip.
    """

    def __init__(self, client: BaseVectorClient):
        self.client = client
        self._collections: dict[str, BaseCollection] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, name: str) -> asyncio.Lock:
        lock = self._locks.get(name)
        if lock is None:
            lock = self._locks[name] = asyncio.Lock()
        return lock

    async def create_collection(
        self,
        name: str,
        metadata: dict[str, Any] | None = None,
        get_or_create: bool = False,
    ) -> BaseCollection:
        validate_collection_name(name)
        metadata = sanitize_metadata(metadata) if metadata else None

        if get_or_create:
            collection = await self.client.get_or_create_collection(name, metadata)
        else:
            collection = await self.client.create_collection(name, metadata)

        self._collections[name] = collection
        logger.info(f"Created collection: {name}")
        return collection

    async def get_collection(self, name: str) -> BaseCollection:
        """Return the cached handle, fetching it from the store on first use.

        Raises:
            StoreError: VALIDATION for a bad name, COLLECTION_NOT_FOUND if missing
        """
        validate_collection_name(name)

        cached = self._collections.get(name)
        if cached is not None:
            return cached

        async with self._lock_for(name):
            cached = self._collections.get(name)
            if cached is not None:
                return cached
            collection = await self.client.get_collection(name)
            self._collections[name] = collection
            logger.debug(f"Cached collection handle: {name}")
            return collection

    async def get_or_create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> BaseCollection:
        validate_collection_name(name)

        async with self._lock_for(name):
            collection = await self.client.get_or_create_collection(
                name, sanitize_metadata(metadata) if metadata else None
            )
            self._collections[name] = collection
        logger.info(f"Ready collection: {name}")
        return collection

    async def delete_collection(self, name: str) -> None:
        validate_collection_name(name)
        await self.client.delete_collection(name)
        self._collections.pop(name, None)
        self._locks.pop(name, None)
        logger.info(f"Deleted collection: {name}")

    async def collection_exists(self, name: str) -> bool:
        """True if the collection exists.

        Only a not-found answer yields False; connection and other failures
        propagate.
        """
        validate_collection_name(name)
        try:
            await self.get_collection(name)
            return True
        except StoreError as e:
            if e.kind is ErrorKind.COLLECTION_NOT_FOUND:
                return False
            raise

    async def list_collections(self) -> list[CollectionInfo]:
        return await self.client.list_collections()

    async def reset_collection(self, name: str, metadata: dict[str, Any] | None = None) -> BaseCollection:
        """Delete and recreate a collection, dropping all of its documents."""
        validate_collection_name(name)
        if await self.collection_exists(name):
            await self.delete_collection(name)
        return await self.create_collection(name, metadata, get_or_create=True)

    async def modify_collection(self, name: str, metadata: dict[str, Any]) -> None:
        collection = await self.get_collection(name)
        await collection.modify(metadata=sanitize_metadata(metadata))
        logger.info(f"Modified collection metadata: {name}")

    async def get_collection_count(self, name: str) -> int:
        collection = await self.get_collection(name)
        return await collection.count()

    async def register_collections(self, configs: list[CollectionConfig]) -> list[str]:
        """Create the configured collections.

        Failures are logged and skipped.

        Returns:
            Names of the collections that are ready
        """
        ready = []
        for config in configs:
            try:
                await self.create_collection(config.name, config.metadata, get_or_create=config.get_or_create)
                ready.append(config.name)
            except StoreError as e:
                logger.error(f"Failed to register collection {config.name}: {e}")
        return ready

    def clear_cache(self, name: str | None = None) -> None:
        """Forget one cached handle, or all of them."""
        if name is None:
            self._collections.clear()
            self._locks.clear()
        else:
            self._collections.pop(name, None)
            self._locks.pop(name, None)

    def is_cached(self, name: str) -> bool:
        return name in self._collections
