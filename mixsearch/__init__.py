"""
mixsearch - mixed-script (Latin/CJK) full-text indexing with hybrid
BM25 + embedding ranking.

Quick start:
    from mixsearch import SearchService, tokenize
    from mixsearch.models import Document
    from mixsearch.repositories import InMemoryDocumentSource, InMemoryIndexPersistence

    tokenize("VideoEditEngine2026")
    # ['video', 'edit', 'engine', '2026', 'videoeditengine2026']

    service = SearchService(
        InMemoryDocumentSource([Document(id="1", title="图书馆", content="图书馆开放时间")]),
        InMemoryIndexPersistence(),
    )
    await service.build_index()
    await service.search("图书馆")
"""

from .exceptions import IndexingError, MixSearchError, PersistenceError, ProviderError
from .models import BuildIndexResponse, Document, SearchResponse, SearchResult
from .tokenizer import TokenizeOptions, TokenStats, tokenize
from .service import SearchService, create_service

__version__ = "0.1.0"

__all__ = [
    "IndexingError",
    "MixSearchError",
    "PersistenceError",
    "ProviderError",
    "BuildIndexResponse",
    "Document",
    "SearchResponse",
    "SearchResult",
    "TokenizeOptions",
    "TokenStats",
    "tokenize",
    "SearchService",
    "create_service",
]
