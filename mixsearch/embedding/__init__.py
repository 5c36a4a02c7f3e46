"""
Embedding providers for semantic scoring.

Usage:
    # Get provider (auto-configured from env):
    from mixsearch.embedding import get_embedding_provider

    provider = get_embedding_provider()
    if provider:
        vector = await provider.embed("machine learning")

    # Or create a specific implementation:
    from mixsearch.embedding import SentenceTransformerEmbeddingProvider

    provider = SentenceTransformerEmbeddingProvider("sentence-transformers/all-MiniLM-L6-v2")
"""

from typing import Optional
from .base import EmbeddingProvider, LazyEmbeddingProvider, ModelState, cosine_similarity
from .local import SentenceTransformerEmbeddingProvider
from .factory import EmbeddingFactory


def get_embedding_provider(force_reload: bool = False) -> Optional[EmbeddingProvider]:
    """
    Get configured embedding provider (factory convenience function).

    Returns None if embeddings are disabled via EMBEDDING_ENABLED=false
    """
    return EmbeddingFactory.create(force_reload=force_reload)


__all__ = [
    'EmbeddingProvider',
    'LazyEmbeddingProvider',
    'ModelState',
    'cosine_similarity',
    'SentenceTransformerEmbeddingProvider',
    'EmbeddingFactory',
    'get_embedding_provider',
]
