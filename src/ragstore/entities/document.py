"""Document entity representing a stored document or a chunk of one."""

from typing import Any

from pydantic import BaseModel, Field


class Document(BaseModel):
    """
    A unit of text stored in a collection.

    The pipeline never mutates a caller's Document; derived documents are
    produced with ``model_copy(update=...)``.
    """
    id: str = Field(..., min_length=1)

    # Content may be absent for vector-only records
    content: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    # Vector Representation (Optional, filled in lazily)
    embedding: list[float] | None = None

    def get_meta(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    model_config = {
        "frozen": False,
        "arbitrary_types_allowed": True
    }


def chunk_id(parent_id: str, chunk_index: int) -> str:
    return f"{parent_id}-chunk-{chunk_index}"


class Chunk(Document):
    """A sub-span of a parent document.

    ``chunk_index`` is dense and 0-based within a parent; ``start_index`` and
    ``end_index`` are character offsets into the parent content when the
    chunk could be located there.
    """
    parent_id: str
    chunk_index: int = Field(ge=0)
    total_chunks: int = Field(ge=1)
    start_index: int | None = None
    end_index: int | None = None

    def to_document(self, **extra_metadata: Any) -> Document:
        """Flatten chunk fields into metadata for storage."""
        metadata = {
            **self.metadata,
            "parent_id": self.parent_id,
            "chunk_index": self.chunk_index,
            "total_chunks": self.total_chunks,
            **extra_metadata,
        }
        if self.start_index is not None:
            metadata["start_index"] = self.start_index
        if self.end_index is not None:
            metadata["end_index"] = self.end_index
        return Document(id=self.id, content=self.content, metadata=metadata, embedding=self.embedding)
