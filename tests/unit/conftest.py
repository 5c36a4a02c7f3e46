"""Unit test configuration - in-memory collaborators and fake providers"""

from typing import Dict, List, Optional

import pytest

from mixsearch.embedding import EmbeddingFactory, EmbeddingProvider
from mixsearch.exceptions import ProviderError
from mixsearch.models import Document
from mixsearch.repositories import InMemoryDocumentSource, InMemoryIndexPersistence


class FakeEmbeddingProvider(EmbeddingProvider):
    """
    Deterministic provider: vectors are looked up by substring.

    The first key contained in the text wins; unknown text embeds to
    `default` (None = no vector).
    """

    def __init__(self, vectors: Dict[str, List[float]], default: Optional[List[float]] = None, fail: bool = False):
        self.vectors = vectors
        self.default = default
        self.fail = fail
        self.calls: List[str] = []

    async def embed(self, text: str) -> Optional[List[float]]:
        self.calls.append(text)
        if self.fail:
            raise ProviderError("model unavailable")
        for key, vector in self.vectors.items():
            if key in text:
                return vector
        return self.default


@pytest.fixture(autouse=True)
def reset_embedding_factory():
    """Never leak the cached provider between tests"""
    EmbeddingFactory._instance = None
    yield
    EmbeddingFactory._instance = None


@pytest.fixture
def sample_documents() -> List[Document]:
    return [
        Document(id="doc-1", title="Kubernetes 部署", content="Kubernetes deployment guide. 容器编排与部署策略。", source="local"),
        Document(id="doc-2", title="图书馆", content="图书馆开放时间：周一至周五。Library opening hours.", source="local"),
        Document(id="doc-3", title="Remote notes", content="Machine learning pipeline 机器学习 for video editing.", source="remote"),
        Document(id="doc-4", title="VideoEditEngine", content="VideoEditEngine2026 renders timelines. Video export settings.", source="remote"),
    ]


@pytest.fixture
def document_source(sample_documents) -> InMemoryDocumentSource:
    return InMemoryDocumentSource(sample_documents)


@pytest.fixture
def index_persistence() -> InMemoryIndexPersistence:
    return InMemoryIndexPersistence()


@pytest.fixture
def fake_provider():
    """Factory for FakeEmbeddingProvider instances"""
    return FakeEmbeddingProvider
