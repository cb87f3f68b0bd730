"""Pytest configuration and global fixtures for ragstore tests."""

from pathlib import Path

import pytest

from ragstore.config.models import CustomConfig
from ragstore.config.settings import Settings
from ragstore.datasource.document_store import DocumentStore
from ragstore.embedder.service import EmbeddingService
from ragstore.entities.document import Document
from ragstore.index_processor.metadata.extractor import MetadataExtractor
from ragstore.index_processor.splitter.text_splitter import TextSplitter
from tests.utils.fakes import FAKE_DIMENSION, RecordingEmbedFunction
from tests.utils.in_memory_vector_store import InMemoryVectorClient


@pytest.fixture
def sample_text():
    return """
    Retrieval-Augmented Generation (RAG) is a technique that combines
    information retrieval with large language models.
    """


@pytest.fixture
def sample_documents() -> list[Document]:
    return [
        Document(
            id="doc1",
            content="RAG combines retrieval and generation.",
            metadata={"source": "doc1.txt", "author": "Alice"},
        ),
        Document(
            id="doc2",
            content="Vector databases enable semantic search.",
            metadata={"source": "doc2.txt", "author": "Bob"},
        ),
    ]


# ==================== Component Fixtures ====================

@pytest.fixture
def settings():
    return Settings(ENV="testing")


@pytest.fixture
def embed_fn():
    return RecordingEmbedFunction()


@pytest.fixture
def embedding_service(embed_fn):
    return EmbeddingService(CustomConfig(embed_fn=embed_fn, dimension=FAKE_DIMENSION, batch_size=4))


@pytest.fixture
def extractor():
    return MetadataExtractor()


@pytest.fixture
def text_splitter(extractor):
    return TextSplitter(extractor=extractor)


@pytest.fixture
def vector_client():
    return InMemoryVectorClient()


@pytest.fixture
def document_store(vector_client, embedding_service, settings):
    return DocumentStore(vector_client, embedding_service=embedding_service, settings=settings)


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    for item in items:
        rel_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "unit" in rel_path.parts:
            item.add_marker(pytest.mark.unit)
        elif "integration" in rel_path.parts:
            item.add_marker(pytest.mark.integration)
