"""Tests for the chunking strategies and the chunker factory.

Uses a realistic technical document to verify that the recursive chunker
respects size limits and loses no text.
"""

import pytest

from ragstore.errors import ErrorKind, StoreError
from ragstore.index_processor.splitter import ChunkerFactory
from ragstore.index_processor.splitter.base import BaseChunker
from ragstore.index_processor.splitter.providers import (
    CharacterChunker,
    MarkdownChunker,
    RecursiveCharacterChunker,
    SemanticChunker,
    TokenChunker,
)

SAMPLE_TECH_DOCUMENT = """Retrieval-Augmented Generation: A Comprehensive Overview

Retrieval-Augmented Generation (RAG) represents a paradigm shift in how large language models interact with external knowledge. By combining dense retrieval mechanisms with generative models, RAG systems can produce more accurate, up-to-date, and verifiable responses compared to purely parametric approaches.

Chunking Strategies

Document chunking is a crucial preprocessing step in RAG systems. The goal is to split long documents into smaller, semantically coherent segments that can be effectively embedded and retrieved! Poor chunking can lead to fragmented context and reduced answer quality.
Typical chunk sizes range from 200 to 1000 tokens? 512 tokens is a common choice.

Averyveryveryveryveryveryveryveryveryveryveryveryveryveryveryveryveryveryveryveryveryveryverylongword ends here."""


class TestRecursiveCharacterChunker:

    def test_chunks_respect_size(self):
        chunker = RecursiveCharacterChunker(chunk_size=100, chunk_overlap=0)
        chunks = chunker.split_text(SAMPLE_TECH_DOCUMENT)

        assert len(chunks) > 1
        assert all(len(chunk) <= 100 for chunk in chunks)

    def test_lossless_without_overlap(self):
        chunker = RecursiveCharacterChunker(chunk_size=100, chunk_overlap=0)
        chunks = chunker.split_text(SAMPLE_TECH_DOCUMENT)

        assert "".join(chunks) == SAMPLE_TECH_DOCUMENT

    def test_overlap_between_chunks(self):
        chunker = RecursiveCharacterChunker(chunk_size=50, chunk_overlap=10)
        chunks = chunker.split_text("word " * 40)

        # Each chunk adds 40 new characters after carrying 10 over
        assert len(chunks) == 5
        assert all(len(chunk) <= 50 for chunk in chunks)
        assert chunks[1].startswith(chunks[0][-10:])

    def test_small_text_single_chunk(self):
        chunker = RecursiveCharacterChunker(chunk_size=100, chunk_overlap=10)
        assert chunker.split_text("Short text.") == ["Short text."]

    def test_empty_text(self):
        chunker = RecursiveCharacterChunker(chunk_size=100, chunk_overlap=10)
        assert chunker.split_text("") == []

    def test_character_fallback(self):
        chunker = RecursiveCharacterChunker(chunk_size=10, chunk_overlap=2, separators=["\n\n"])
        chunks = chunker.split_text("x" * 25)

        assert chunks == ["x" * 10, "x" * 10, "x" * 9]

    @pytest.mark.parametrize("size,overlap", [(0, 0), (100, 100), (100, 150)])
    def test_invalid_parameters(self, size, overlap):
        with pytest.raises(StoreError) as exc_info:
            RecursiveCharacterChunker(chunk_size=size, chunk_overlap=overlap)
        assert exc_info.value.kind is ErrorKind.VALIDATION


class TestCharacterChunker:

    def test_oversized_piece_kept_whole(self):
        chunker = CharacterChunker(chunk_size=20, chunk_overlap=0, separator="\n\n")
        text = "aaaa\n\nbbbb\n\n" + "c" * 30

        assert chunker.split_text(text) == ["aaaa\n\nbbbb\n\n", "c" * 30]

    def test_separator_reinserted_when_not_kept(self):
        chunker = CharacterChunker(chunk_size=20, chunk_overlap=0, separator="|", keep_separator=False)
        assert chunker.split_text("a|b|c") == ["a|b|c"]


class TestMarkdownChunker:

    def test_headings_open_chunks(self):
        text = (
            "# Intro\nSome intro text here.\n"
            "## Usage\nRun the tool with options.\n"
            "## Config\nSet the environment vars."
        )
        chunker = MarkdownChunker(chunk_size=60, chunk_overlap=0)
        chunks = chunker.split_text(text)

        assert len(chunks) == 3
        assert chunks[1].startswith("\n## Usage")
        assert chunks[2].startswith("\n## Config")
        assert "".join(chunks) == text


class FakeEncoding:
    """Whitespace tokenizer standing in for a tiktoken encoding."""

    def encode(self, text, disallowed_special=()):
        return text.split(" ")

    def decode(self, tokens):
        return " ".join(tokens)


class TestTokenChunker:

    @pytest.fixture(autouse=True)
    def fake_encoding(self, mocker):
        return mocker.patch(
            "ragstore.index_processor.splitter.providers.token.tiktoken.get_encoding",
            return_value=FakeEncoding(),
        )

    def test_windows_step_by_size_minus_overlap(self, fake_encoding):
        chunker = TokenChunker(chunk_size=4, chunk_overlap=1)
        text = " ".join(f"t{i}" for i in range(10))

        chunks = chunker.split_text(text)

        fake_encoding.assert_called_once_with("cl100k_base")
        assert chunks == ["t0 t1 t2 t3", "t3 t4 t5 t6", "t6 t7 t8 t9"]

    def test_short_text(self):
        chunker = TokenChunker(chunk_size=10, chunk_overlap=2)
        assert chunker.split_text("only three tokens") == ["only three tokens"]


class TestChunkerFactory:

    def test_create_registered_strategies(self):
        assert isinstance(ChunkerFactory.create("recursive", 100, 10), RecursiveCharacterChunker)
        assert isinstance(ChunkerFactory.create("markdown", 100, 10), MarkdownChunker)

        semantic = ChunkerFactory.create("semantic", 100, 10)
        assert isinstance(semantic, SemanticChunker)
        assert "; " in semantic.separators

    def test_custom_separators(self):
        recursive = ChunkerFactory.create("recursive", 100, 10, separators=["\n", " "])
        assert recursive.separators == ["\n", " "]

        character = ChunkerFactory.create("character", 100, 10, separators=["|", " "])
        assert isinstance(character, CharacterChunker)
        assert character.separator == "|"

    def test_unknown_strategy(self):
        with pytest.raises(StoreError) as exc_info:
            ChunkerFactory.create("sentencepiece", 100, 10)
        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert "recursive" in exc_info.value.message

    def test_register(self, monkeypatch):
        class LineChunker(BaseChunker):
            def split_text(self, text):
                return text.splitlines()

        monkeypatch.setattr(ChunkerFactory, "_registry", dict(ChunkerFactory._registry))
        ChunkerFactory.register("lines", LineChunker)

        assert "lines" in ChunkerFactory.list_types()
        assert ChunkerFactory.create("lines", 100, 0).split_text("a\nb") == ["a", "b"]

    def test_register_rejects_non_chunker(self):
        with pytest.raises(TypeError):
            ChunkerFactory.register("bad", dict)
