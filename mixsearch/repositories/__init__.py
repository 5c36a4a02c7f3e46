"""
Collaborators for the index builder and ranker.

Usage:
    from mixsearch.repositories import InMemoryDocumentSource, InMemoryIndexPersistence

    source = InMemoryDocumentSource([Document(id="doc-1", content="...")])
    persistence = InMemoryIndexPersistence()

Production implementations (GcsIndexPersistence, PostgresDocumentSource)
live in .storage and .database and import their cloud clients on use.
"""

from .base import DocumentSource, IndexPersistence
from .memory import InMemoryDocumentSource, InMemoryIndexPersistence

__all__ = [
    "DocumentSource",
    "IndexPersistence",
    "InMemoryDocumentSource",
    "InMemoryIndexPersistence",
]
