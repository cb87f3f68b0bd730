"""Document splitting service.

Detects the content type of a document, picks a strategy and chunk size
for it, splits it into ``Chunk`` objects and optionally enriches each chunk
with extracted metadata.
"""

import json
import re
from collections import defaultdict
from typing import Any
from uuid import uuid4

from loguru import logger

from ragstore.config.models import ChunkingOptions
from ragstore.config.settings import Settings
from ragstore.entities.document import Chunk, Document, chunk_id
from ragstore.index_processor.metadata.extractor import MetadataExtractor
from ragstore.utils.performance import timer

from .base import BaseChunker
from .factory import ChunkerFactory

CODE_PATTERNS = [
    re.compile(r"^import\s+", re.M),
    re.compile(r"^export\s+", re.M),
    re.compile(r"^function\s+\w+\s*\(", re.M),
    re.compile(r"^class\s+\w+", re.M),
    re.compile(r"^const\s+\w+\s*=", re.M),
    re.compile(r"^let\s+\w+\s*=", re.M),
    re.compile(r"^var\s+\w+\s*=", re.M),
    re.compile(r"^\s*//", re.M),  # Comments
    re.compile(r"^\s*/\*", re.M),  # Block comments
    re.compile(r"{[\s\S]*}"),  # Curly braces
]

MARKDOWN_PATTERNS = [
    re.compile(r"^#{1,6}\s+", re.M),  # Headers
    re.compile(r"^\*\s+", re.M),  # Bullet points
    re.compile(r"^\d+\.\s+", re.M),  # Numbered lists
    re.compile(r"\[.*\]\(.*\)"),  # Links
    re.compile(r"```[\s\S]*```"),  # Code blocks
    re.compile(r"^\|.*\|", re.M),  # Tables
]

CONVERSATION_PATTERNS = [
    re.compile(r"^(User|Assistant|Human|AI|Q|A):", re.M),
    re.compile(r"^>\s+", re.M),  # Quoted text
    re.compile(r"^\d{1,2}:\d{2}", re.M),  # Timestamps
]

STRATEGY_BY_CONTENT_TYPE = {
    "code": "recursive",
    "markdown": "markdown",
    "structured": "character",
    "conversation": "semantic",
}

CHUNK_SIZE_BY_CONTENT_TYPE = {
    "code": 1500,
    "markdown": 1000,
    "structured": 800,
    "conversation": 500,
}


class TextSplitter:
    """Splits documents into chunks with content-aware defaults.

    Attributes:
        extractor: Metadata extractor used when extraction is requested
        default_chunk_size: Chunk size for plain text and explicit strategies
        default_chunk_overlap: Overlap used when none is requested
    """

    def __init__(
        self,
        extractor: MetadataExtractor | None = None,
        default_chunk_size: int = 1000,
        default_chunk_overlap: int = 200,
    ):
        self.extractor = extractor or MetadataExtractor()
        self.default_chunk_size = default_chunk_size
        self.default_chunk_overlap = default_chunk_overlap

    @classmethod
    def from_settings(cls, settings: Settings, extractor: MetadataExtractor | None = None) -> "TextSplitter":
        return cls(
            extractor=extractor,
            default_chunk_size=settings.EMBEDDING_CHUNK_SIZE,
            default_chunk_overlap=settings.EMBEDDING_CHUNK_OVERLAP,
        )

    # ------------------------------------------------------------------
    # Content type heuristics
    # ------------------------------------------------------------------

    def detect_content_type(self, content: str, metadata: dict[str, Any] | None = None) -> str:
        """Classify content as code, markdown, structured, conversation or text.

        An explicit ``content_type`` in metadata wins; otherwise the checks run
        in that order and the first match decides.
        """
        if metadata and metadata.get("content_type"):
            return str(metadata["content_type"])

        if any(p.search(content) for p in CODE_PATTERNS):
            return "code"
        if any(p.search(content) for p in MARKDOWN_PATTERNS):
            return "markdown"
        if self._is_structured(content):
            return "structured"
        if any(p.search(content) for p in CONVERSATION_PATTERNS):
            return "conversation"
        return "text"

    @staticmethod
    def _is_structured(content: str) -> bool:
        try:
            json.loads(content)
            return True
        except ValueError:
            # YAML front matter or a leading bracket
            return bool(re.match(r"^\s*[{\[]", content)) or content.startswith("---\n")

    def strategy_for_content_type(self, content_type: str) -> str:
        return STRATEGY_BY_CONTENT_TYPE.get(content_type, "recursive")

    def optimal_chunk_size(self, content_type: str, requested_size: int | None = None) -> int:
        if requested_size:
            return requested_size
        return CHUNK_SIZE_BY_CONTENT_TYPE.get(content_type, self.default_chunk_size)

    # ------------------------------------------------------------------
    # Splitting
    # ------------------------------------------------------------------

    def _create_chunker(self, options: ChunkingOptions, strategy: str | None = None) -> BaseChunker:
        chunk_size = options.chunk_size or self.default_chunk_size
        if options.chunk_overlap is not None:
            chunk_overlap = options.chunk_overlap
        else:
            chunk_overlap = min(self.default_chunk_overlap, chunk_size // 2)
        return ChunkerFactory.create(
            strategy or options.strategy or "recursive",
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=options.separators,
        )

    def split_text(self, text: str, options: ChunkingOptions | None = None) -> list[str]:
        """Split a raw string with the requested strategy (recursive by default)."""
        chunker = self._create_chunker(options or ChunkingOptions())
        return chunker.split_text(text)

    def split_documents(
        self,
        documents: list[Document],
        options: ChunkingOptions | None = None,
    ) -> list[Chunk]:
        """Split documents into chunks.

        A document whose split fails becomes a single chunk carrying its
        metadata; the rest of the batch is unaffected.

        Args:
            documents: Documents to split; they are not modified
            options: Strategy, sizes and extraction flags

        Returns:
            Chunks of all documents, in document order

        Raises:
            StoreError: VALIDATION for an unknown strategy or bad sizes
        """
        options = options or ChunkingOptions()
        strategy = options.strategy or "recursive"
        chunker = self._create_chunker(options, strategy)

        all_chunks: list[Chunk] = []
        with timer(f"Splitting {len(documents)} documents ({strategy})"):
            for doc in documents:
                try:
                    chunks = self._split_document(doc, chunker, strategy, options)
                except Exception as e:
                    logger.warning(f"Failed to split document {doc.id}, storing it as a single chunk: {e}")
                    chunks = [
                        Chunk(
                            id=chunk_id(doc.id, 0),
                            content=doc.content,
                            metadata=dict(doc.metadata),
                            parent_id=doc.id,
                            chunk_index=0,
                            total_chunks=1,
                        )
                    ]
                all_chunks.extend(chunks)

        return all_chunks

    def _split_document(
        self,
        doc: Document,
        chunker: BaseChunker,
        strategy: str,
        options: ChunkingOptions,
    ) -> list[Chunk]:
        content = doc.content or ""
        texts = chunker.split_text(content) or [content]
        total = len(texts)

        extraction = None
        if options.extract_metadata:
            extraction = options.extraction_options(doc.metadata.get("content_type") or strategy)

        chunks = []
        search_from = 0
        for index, text in enumerate(texts):
            start = content.find(text, search_from)
            if start >= 0:
                search_from = start + 1
            metadata = dict(doc.metadata)
            if extraction is not None:
                metadata.update(self.extractor.extract(text, extraction).to_metadata())

            chunks.append(
                Chunk(
                    id=chunk_id(doc.id, index),
                    content=text,
                    metadata=metadata,
                    parent_id=doc.id,
                    chunk_index=index,
                    total_chunks=total,
                    start_index=start if start >= 0 else None,
                    end_index=start + len(text) if start >= 0 else None,
                )
            )

        logger.debug(f"Split document {doc.id} into {total} chunks using {strategy} strategy")
        return chunks

    def smart_split(
        self,
        content: str,
        metadata: dict[str, Any] | None = None,
        options: ChunkingOptions | None = None,
    ) -> list[Chunk]:
        """Detect the content type, then split with the matching strategy.

        Metadata extraction, keywords and complexity analysis are on unless
        explicitly disabled. The document id is ``metadata["id"]`` or a
        generated ``doc-<uuid>``.
        """
        options = options or ChunkingOptions()
        metadata = dict(metadata or {})
        doc_id = metadata.pop("id", None)

        content_type = self.detect_content_type(content, metadata)
        strategy = self.strategy_for_content_type(content_type)
        chunk_size = self.optimal_chunk_size(content_type, options.chunk_size)
        logger.debug(f"Using {strategy} strategy with chunk size {chunk_size} for {content_type} content")

        doc = Document(
            id=str(doc_id or f"doc-{uuid4()}"),
            content=content,
            metadata={**metadata, "content_type": content_type},
        )
        smart_options = options.model_copy(
            update={
                "strategy": strategy,
                "chunk_size": chunk_size,
                "extract_metadata": options.extract_metadata is not False,
                "extract_keywords": options.extract_keywords is not False,
                "analyze_complexity": options.analyze_complexity is not False,
            }
        )
        return self.split_documents([doc], smart_options)

    def merge_small_chunks(self, chunks: list[Chunk], min_chunk_size: int = 100) -> list[Chunk]:
        """Merge undersized chunks forward into their successors.

        A chunk is appended to the running accumulator when both share a
        parent, the indices are consecutive and the accumulator is shorter
        than ``min_chunk_size``. Merged results are never re-split. Indices,
        totals and ids are renumbered per parent afterwards.
        """
        merged: list[Chunk] = []
        current: Chunk | None = None

        for chunk in chunks:
            if current is None:
                current = chunk.model_copy()
                continue

            if (
                chunk.parent_id == current.parent_id
                and chunk.chunk_index == current.chunk_index + 1
                and len(current.content or "") < min_chunk_size
            ):
                current = current.model_copy(
                    update={
                        "content": f"{current.content or ''}\n{chunk.content or ''}",
                        "chunk_index": chunk.chunk_index,
                        "end_index": chunk.end_index,
                    }
                )
            else:
                merged.append(current)
                current = chunk.model_copy()

        if current is not None:
            merged.append(current)

        totals: dict[str, int] = defaultdict(int)
        for chunk in merged:
            totals[chunk.parent_id] += 1

        positions: dict[str, int] = defaultdict(int)
        renumbered = []
        for chunk in merged:
            index = positions[chunk.parent_id]
            positions[chunk.parent_id] += 1
            renumbered.append(
                chunk.model_copy(
                    update={
                        "id": chunk_id(chunk.parent_id, index),
                        "chunk_index": index,
                        "total_chunks": totals[chunk.parent_id],
                    }
                )
            )

        if len(renumbered) != len(chunks):
            logger.debug(f"Merged {len(chunks)} chunks into {len(renumbered)}")
        return renumbered
