"""
Service facade: index rebuild and hybrid search.

Usage:
    service = create_service()          # PostgreSQL + GCS + env settings
    await service.start()
    await service.build_index()
    response = await service.search("机器学习 pipeline", scope="local")
    await service.close()

Tests and local experiments wire in-memory collaborators directly:
    service = SearchService(InMemoryDocumentSource(docs), InMemoryIndexPersistence())
"""

import logging
from typing import Optional

from .config import Settings
from .embedding import EmbeddingFactory
from .embedding.base import EmbeddingProvider
from .exceptions import PersistenceError
from .index.builder import IndexBuilder, IndexBuilderConfig
from .models import BuildIndexResponse, SearchResponse
from .repositories.base import DocumentSource, IndexPersistence
from .search import Ranker, RankerConfig, SearchOptions
from .tokenizer import TokenizeOptions

logger = logging.getLogger(__name__)


class SearchService:
    """Wires the index builder and the ranker to one set of collaborators"""

    def __init__(
        self,
        document_source: DocumentSource,
        index_persistence: IndexPersistence,
        embedding_provider: Optional[EmbeddingProvider] = None,
        ranker_config: Optional[RankerConfig] = None,
        builder_config: Optional[IndexBuilderConfig] = None,
    ):
        self.document_source = document_source
        self.index_persistence = index_persistence
        self.embedding_provider = embedding_provider
        self.builder_config = builder_config or IndexBuilderConfig()

        tokenize_options: TokenizeOptions = self.builder_config.tokenize_options
        self.builder = IndexBuilder(document_source, index_persistence, embedding_provider, self.builder_config)
        self.ranker = Ranker(
            index_persistence,
            document_source,
            embedding_provider,
            ranker_config or RankerConfig(),
            tokenize_options=tokenize_options,
        )

    async def start(self):
        """Open collaborator connections that need it (PostgreSQL pool)"""
        connect = getattr(self.document_source, "connect", None)
        if connect is not None:
            await connect()

    async def close(self):
        disconnect = getattr(self.document_source, "disconnect", None)
        if disconnect is not None:
            await disconnect()
        if self.embedding_provider is not None:
            self.embedding_provider.close()

    async def build_index(self) -> BuildIndexResponse:
        """
        Rebuild the index from every document in the source.

        Persistence failures are reported as success=False (the previously
        committed index stays in place).
        """
        try:
            result = await self.builder.execute()
        except PersistenceError as e:
            logger.error(f"Index build failed: {e}")
            return BuildIndexResponse(success=False, message=str(e))

        if result.document_count == 0:
            message = "No documents to index"
        else:
            message = "Index built successfully"

        return BuildIndexResponse(
            success=True,
            message=message,
            indexed_count=result.document_count,
            total_terms=result.unique_term_count,
            avg_doc_length=result.average_document_length,
            skipped_count=result.skipped_count,
        )

    async def search(
        self,
        query: str,
        scope: str = "all",
        alpha: Optional[float] = None,
        use_embedding: Optional[bool] = None,
        top_k: Optional[int] = None,
    ) -> SearchResponse:
        """
        Hybrid search within a scope ("local", "remote" or "all").

        Raises:
            pydantic.ValidationError: alpha outside [0, 1] or top_k < 1
        """
        options = SearchOptions(alpha=alpha, use_embedding=use_embedding, top_k=top_k)
        try:
            return await self.ranker.search(query, scope, options)
        except PersistenceError as e:
            logger.error(f"Search failed for '{query}': {e}")
            return SearchResponse(query=query or "", scope=scope, total_results=0, results=[], error=str(e))


def create_service(settings: Optional[Settings] = None) -> SearchService:
    """
    Build a SearchService on PostgreSQL documents and GCS index storage.

    Args:
        settings: Parsed settings (default: Settings())
    """
    # Imported here so in-memory use doesn't need cloud client credentials
    from .repositories.database import PostgresDocumentSource
    from .repositories.storage import GcsIndexPersistence

    settings = settings or Settings()

    document_source = PostgresDocumentSource(settings.database_url, table=settings.documents_table)
    index_persistence = GcsIndexPersistence(settings.gcs_bucket, prefix=settings.gcs_index_prefix)
    embedding_provider = EmbeddingFactory.create(
        enabled=settings.embedding_enabled,
        model=settings.embedding_model,
    )

    logger.info(
        f"Search service configured: bucket={settings.gcs_bucket}/{settings.gcs_index_prefix}, "
        f"table={settings.documents_table}, embeddings={'on' if embedding_provider else 'off'}"
    )

    return SearchService(
        document_source,
        index_persistence,
        embedding_provider,
        ranker_config=RankerConfig(
            k1=settings.bm25_k1,
            b=settings.bm25_b,
            alpha=settings.search_alpha,
            use_embedding=settings.search_use_embedding,
        ),
        builder_config=IndexBuilderConfig(
            max_workers=settings.index_build_workers,
            title_weight=settings.index_title_weight,
        ),
    )
