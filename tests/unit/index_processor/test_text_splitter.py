"""Tests for the content-aware TextSplitter."""

import pytest

from ragstore.config.models import ChunkingOptions
from ragstore.config.settings import Settings
from ragstore.entities.document import Chunk, Document
from ragstore.errors import ErrorKind, StoreError
from ragstore.index_processor.splitter import TextSplitter
from ragstore.index_processor.splitter.providers import RecursiveCharacterChunker

PARAGRAPHS = "\n\n".join(
    f"Paragraph {i} talks about retrieval and storage in plain words without any markup at all."
    for i in range(8)
)


@pytest.fixture
def splitter():
    return TextSplitter()


class TestContentDetection:

    @pytest.mark.parametrize(
        "content,expected",
        [
            ("import os\nprint(os.getcwd())", "code"),
            ("# Title\n\nSome body text.", "markdown"),
            ("[1, 2, 3]", "structured"),
            ("---\ntitle: notes\n", "structured"),
            ("User: hi there\nAssistant: hello", "conversation"),
            ("Just some plain prose.", "text"),
        ],
    )
    def test_detect_content_type(self, splitter, content, expected):
        assert splitter.detect_content_type(content) == expected

    def test_metadata_hint_wins(self, splitter):
        assert splitter.detect_content_type("import os", {"content_type": "markdown"}) == "markdown"

    def test_strategy_and_size(self, splitter):
        assert splitter.strategy_for_content_type("code") == "recursive"
        assert splitter.strategy_for_content_type("markdown") == "markdown"
        assert splitter.strategy_for_content_type("structured") == "character"
        assert splitter.strategy_for_content_type("conversation") == "semantic"
        assert splitter.strategy_for_content_type("text") == "recursive"

        assert splitter.optimal_chunk_size("code") == 1500
        assert splitter.optimal_chunk_size("conversation") == 500
        assert splitter.optimal_chunk_size("text") == 1000
        assert splitter.optimal_chunk_size("code", 300) == 300

    def test_from_settings(self):
        splitter = TextSplitter.from_settings(Settings(EMBEDDING_CHUNK_SIZE=400, EMBEDDING_CHUNK_OVERLAP=40))
        assert splitter.default_chunk_size == 400
        assert splitter.default_chunk_overlap == 40
        assert splitter.optimal_chunk_size("text") == 400


class TestSplitDocuments:

    def test_chunk_fields(self, splitter):
        doc = Document(id="doc1", content=PARAGRAPHS, metadata={"source": "a.txt"})

        chunks = splitter.split_documents([doc], ChunkingOptions(chunk_size=200, chunk_overlap=0))

        assert len(chunks) > 1
        assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
        assert all(c.total_chunks == len(chunks) for c in chunks)
        assert all(c.parent_id == "doc1" for c in chunks)
        assert chunks[0].id == "doc1-chunk-0"
        assert all(c.metadata == {"source": "a.txt"} for c in chunks)
        for chunk in chunks:
            assert PARAGRAPHS[chunk.start_index:chunk.end_index] == chunk.content

    def test_documents_not_mutated(self, splitter):
        doc = Document(id="doc1", content=PARAGRAPHS, metadata={"source": "a.txt"})
        splitter.split_documents([doc], ChunkingOptions(chunk_size=200, extract_metadata=True))
        assert doc.metadata == {"source": "a.txt"}

    def test_extraction_only_requested_facets(self, splitter):
        doc = Document(id="doc1", content="# Guide\n\nThe async client uses a cache.")

        chunks = splitter.split_documents([doc], ChunkingOptions(extract_metadata=True, extract_topics=True))

        metadata = chunks[0].metadata
        assert metadata["category"] == "documentation"
        assert metadata["topics"] == ["guide"]
        assert "headings" in metadata
        assert "keywords" not in metadata
        assert "reading_time_minutes" not in metadata

    def test_unknown_strategy_raises(self, splitter):
        doc = Document(id="doc1", content="text")
        with pytest.raises(StoreError) as exc_info:
            splitter.split_documents([doc], ChunkingOptions(strategy="unknown"))
        assert exc_info.value.kind is ErrorKind.VALIDATION

    def test_overlap_not_below_size(self, splitter):
        with pytest.raises(StoreError):
            splitter.split_documents(
                [Document(id="d", content="text")],
                ChunkingOptions(chunk_size=50, chunk_overlap=50),
            )

    def test_unspecified_overlap_is_clamped(self, splitter):
        # Default overlap 200 would be invalid for chunk_size=100
        chunks = splitter.split_documents([Document(id="d", content=PARAGRAPHS)], ChunkingOptions(chunk_size=100))
        assert all(len(c.content) <= 100 for c in chunks)

    def test_failed_split_falls_back_to_single_chunk(self, splitter, mocker):
        mocker.patch.object(RecursiveCharacterChunker, "split_text", side_effect=RuntimeError("boom"))
        docs = [
            Document(id="a", content="first", metadata={"k": 1}),
            Document(id="b", content="second"),
        ]

        chunks = splitter.split_documents(docs)

        assert [c.id for c in chunks] == ["a-chunk-0", "b-chunk-0"]
        assert chunks[0].content == "first"
        assert chunks[0].metadata == {"k": 1}
        assert all(c.total_chunks == 1 for c in chunks)

    def test_empty_content_yields_one_chunk(self, splitter):
        chunks = splitter.split_documents([Document(id="empty", content="")])
        assert len(chunks) == 1
        assert chunks[0].content == ""

    def test_split_text(self, splitter):
        texts = splitter.split_text(PARAGRAPHS, ChunkingOptions(chunk_size=200, chunk_overlap=0))
        assert "".join(texts) == PARAGRAPHS


class TestSmartSplit:

    def test_markdown_content(self, splitter):
        content = "# Setup\n\nInstall the api client.\n\n## Usage\n\nCall the service with a query."

        chunks = splitter.smart_split(content, {"id": "guide", "source": "guide.md"})

        assert chunks[0].id == "guide-chunk-0"
        metadata = chunks[0].metadata
        assert metadata["content_type"] == "markdown"
        assert metadata["source"] == "guide.md"
        assert "id" not in metadata
        assert "keywords" in metadata
        assert "complexity" in metadata
        assert "topics" not in metadata

    def test_generated_id(self, splitter):
        chunks = splitter.smart_split("Just some plain prose.")
        assert chunks[0].parent_id.startswith("doc-")

    def test_extraction_can_be_disabled(self, splitter):
        chunks = splitter.smart_split("Just some plain prose.", options=ChunkingOptions(extract_metadata=False))
        assert chunks[0].metadata == {"content_type": "text"}

    def test_uses_content_type_size(self, splitter):
        content = "User: " + "hello there " * 100
        chunks = splitter.smart_split(content)
        assert chunks[0].metadata["content_type"] == "conversation"
        assert all(len(c.content) <= 500 for c in chunks)


class TestMergeSmallChunks:

    @staticmethod
    def _chunk(parent, index, content, total=4):
        return Chunk(
            id=f"{parent}-chunk-{index}",
            content=content,
            parent_id=parent,
            chunk_index=index,
            total_chunks=total,
        )

    def test_merge_forward_and_renumber(self, splitter):
        chunks = [
            self._chunk("p", 0, "a" * 10),
            self._chunk("p", 1, "b" * 10),
            self._chunk("p", 2, "c" * 200),
            self._chunk("p", 3, "d" * 10),
        ]

        merged = splitter.merge_small_chunks(chunks, min_chunk_size=100)

        assert [c.id for c in merged] == ["p-chunk-0", "p-chunk-1"]
        assert merged[0].content == "a" * 10 + "\n" + "b" * 10 + "\n" + "c" * 200
        assert merged[1].content == "d" * 10
        assert [c.chunk_index for c in merged] == [0, 1]
        assert all(c.total_chunks == 2 for c in merged)

    def test_parents_never_merged(self, splitter):
        chunks = [self._chunk("p", 0, "a", total=1), self._chunk("q", 0, "b", total=1)]

        merged = splitter.merge_small_chunks(chunks)

        assert [c.id for c in merged] == ["p-chunk-0", "q-chunk-0"]

    def test_empty(self, splitter):
        assert splitter.merge_small_chunks([]) == []
