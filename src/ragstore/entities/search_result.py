"""Typed views of vector store read results."""

from typing import Any

from pydantic import BaseModel, Field


class QueryResult(BaseModel):
    """Nested per-query results: one inner list per query vector.

    Fields that were not included in the query stay None.
    """

    ids: list[list[str]] = Field(default_factory=list)
    documents: list[list[str | None]] | None = None
    metadatas: list[list[dict[str, Any] | None]] | None = None
    distances: list[list[float | None]] | None = None
    embeddings: list[list[list[float]]] | None = None

    model_config = {
        "frozen": True,  # Results are immutable
    }


class GetResult(BaseModel):
    """Flat results of a get/peek call."""

    ids: list[str] = Field(default_factory=list)
    documents: list[str | None] | None = None
    metadatas: list[dict[str, Any] | None] | None = None
    embeddings: list[list[float]] | None = None

    model_config = {
        "frozen": True,
    }

    def __len__(self) -> int:
        return len(self.ids)


class SimilaritySearchResult(BaseModel):
    """First-query results flattened into parallel lists.

    Attributes:
        ids: Matched document ids, nearest first
        documents: Stored content per match
        metadatas: Stored metadata per match
        distances: Distances with missing entries dropped
    """

    ids: list[str] = Field(default_factory=list)
    documents: list[str | None] = Field(default_factory=list)
    metadatas: list[dict[str, Any] | None] = Field(default_factory=list)
    distances: list[float] = Field(default_factory=list)

    model_config = {
        "frozen": True,
    }

    @classmethod
    def from_query_result(cls, result: QueryResult) -> "SimilaritySearchResult":
        def first(rows):
            return list(rows[0]) if rows else []

        return cls(
            ids=first(result.ids),
            documents=first(result.documents),
            metadatas=first(result.metadatas),
            distances=[d for d in first(result.distances) if d is not None],
        )


class CollectionInfo(BaseModel):
    name: str
    id: str | None = None
    metadata: dict[str, Any] | None = None

    model_config = {
        "frozen": True,
    }
