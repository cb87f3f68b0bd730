import pytest
from pydantic import ValidationError

from ragstore.entities import (
    Chunk,
    ContentCategory,
    Document,
    ExtractedMetadata,
    GetResult,
    Heading,
    QueryResult,
    SimilaritySearchResult,
    chunk_id,
)


class TestDocument:

    def test_requires_non_empty_id(self):
        with pytest.raises(ValidationError):
            Document(id="", content="text")

    def test_defaults(self):
        doc = Document(id="a")
        assert doc.content is None
        assert doc.metadata == {}
        assert doc.embedding is None
        assert doc.get_meta("missing", "fallback") == "fallback"


class TestChunk:

    def test_chunk_id(self):
        assert chunk_id("readme", 3) == "readme-chunk-3"

    def test_to_document_flattens_fields(self):
        chunk = Chunk(
            id="readme-chunk-1",
            content="second part",
            metadata={"source": "README.md"},
            parent_id="readme",
            chunk_index=1,
            total_chunks=2,
            start_index=100,
            end_index=111,
        )

        doc = chunk.to_document(original_document_id="readme")

        assert type(doc) is Document
        assert doc.id == "readme-chunk-1"
        assert doc.metadata == {
            "source": "README.md",
            "parent_id": "readme",
            "chunk_index": 1,
            "total_chunks": 2,
            "original_document_id": "readme",
            "start_index": 100,
            "end_index": 111,
        }

    def test_to_document_without_offsets(self):
        chunk = Chunk(id="p-chunk-0", content="x", parent_id="p", chunk_index=0, total_chunks=1)
        metadata = chunk.to_document().metadata
        assert "start_index" not in metadata
        assert "end_index" not in metadata

    def test_index_bounds(self):
        with pytest.raises(ValidationError):
            Chunk(id="p-chunk-0", parent_id="p", chunk_index=-1, total_chunks=1)
        with pytest.raises(ValidationError):
            Chunk(id="p-chunk-0", parent_id="p", chunk_index=0, total_chunks=0)


class TestResults:

    def test_similarity_result_takes_first_query(self):
        result = QueryResult(
            ids=[["a", "b"], ["c"]],
            documents=[["doc a", "doc b"], ["doc c"]],
            metadatas=[[{"k": 1}, None], [None]],
            distances=[[0.1, None], [0.5]],
        )

        flat = SimilaritySearchResult.from_query_result(result)

        assert flat.ids == ["a", "b"]
        assert flat.documents == ["doc a", "doc b"]
        assert flat.metadatas == [{"k": 1}, None]
        assert flat.distances == [0.1]

    def test_similarity_result_from_empty_query(self):
        flat = SimilaritySearchResult.from_query_result(QueryResult())
        assert flat.ids == []
        assert flat.distances == []

    def test_get_result_len(self):
        assert len(GetResult(ids=["a", "b"])) == 2
        assert len(GetResult()) == 0


class TestExtractedMetadata:

    def test_to_metadata_drops_unset_fields(self):
        meta = ExtractedMetadata(
            category=ContentCategory.DOCUMENTATION,
            headings=[Heading(level=1, text="Intro")],
            keywords=["api"],
        )

        flat = meta.to_metadata()

        assert flat["category"] == "documentation"
        assert flat["headings"] == [{"level": 1, "text": "Intro"}]
        assert flat["keywords"] == ["api"]
        assert "topics" not in flat
        assert "code_language" not in flat

    def test_heading_level_bounds(self):
        with pytest.raises(ValidationError):
            Heading(level=7, text="too deep")
