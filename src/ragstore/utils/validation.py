"""Input validation that runs before any store call."""

import re

from ragstore.errors import StoreError

COLLECTION_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*[a-zA-Z0-9]$")
MAX_COLLECTION_NAME_LENGTH = 63


def validate_collection_name(name: str) -> None:
    """Raise a VALIDATION StoreError unless ``name`` is a usable collection name.

    Names are 2-63 characters, start and end alphanumeric, and contain only
    alphanumerics, ``.``, ``_`` and ``-``.
    """
    if not name or not isinstance(name, str):
        raise StoreError.validation("Collection name must be a non-empty string", "name", name)

    if len(name) > MAX_COLLECTION_NAME_LENGTH:
        raise StoreError.validation(
            f"Collection name must be at most {MAX_COLLECTION_NAME_LENGTH} characters",
            "name",
            name,
        )

    if not COLLECTION_NAME_PATTERN.match(name):
        raise StoreError.validation(
            "Collection name must start and end with alphanumeric characters "
            "and contain only alphanumeric characters, dots, underscores, and hyphens",
            "name",
            name,
        )


def validate_chunking(chunk_size: int, chunk_overlap: int) -> None:
    if chunk_size <= 0:
        raise StoreError.validation("chunk_size must be positive", "chunk_size", chunk_size)
    if chunk_overlap < 0 or chunk_overlap >= chunk_size:
        raise StoreError.validation(
            "chunk_overlap must be in [0, chunk_size)", "chunk_overlap", chunk_overlap
        )
