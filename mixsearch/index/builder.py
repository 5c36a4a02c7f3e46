"""
Index builder - full rebuild of the inverted index from the document corpus.

Flow:
    clear staged generation -> find_all() -> tokenize documents (thread pool)
    -> merge postings/statistics in corpus order -> optional document
    embeddings -> save_index / save_stats / save_embeddings -> commit()

Tokenization is CPU-bound and pure, so it runs in a ThreadPoolExecutor and
only the merge touches shared state.
"""

import asyncio
import logging
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..exceptions import IndexingError, ProviderError
from ..embedding.base import EmbeddingProvider
from ..models import Document
from ..repositories.base import DocumentSource, IndexPersistence
from ..tokenizer import TokenizeOptions, tokenize_with_positions
from .types import DocumentStatistics, InvertedIndex, Posting

logger = logging.getLogger(__name__)


@dataclass
class IndexBuilderConfig:
    """
    max_workers: thread pool size for tokenization
    title_weight: copies of the title prepended to the content (0 = content only)
    record_positions: store token offsets in postings
    embedding_text_chars: content prefix (in chars) embedded after the title
    """
    max_workers: int = 4
    title_weight: int = 0
    record_positions: bool = True
    embedding_text_chars: int = 500
    tokenize_options: TokenizeOptions = field(default_factory=TokenizeOptions)


@dataclass
class BuildResult:
    document_count: int = 0
    unique_term_count: int = 0
    average_document_length: float = 0.0
    skipped_count: int = 0
    embedded_count: int = 0
    elapsed_seconds: float = 0.0


@dataclass
class _AnalyzedDocument:
    document: Document
    length: int
    term_frequencies: Dict[str, int]
    positions: Dict[str, List[int]]


def analyze_document(document: Document, config: IndexBuilderConfig) -> _AnalyzedDocument:
    """
    Tokenize one document (document mode) into TF map + positions.

    Raises:
        IndexingError: tokenization failed
    """
    text = document.content or ""
    if config.title_weight > 0 and document.title:
        text = " ".join([document.title] * config.title_weight + [text])

    try:
        token_infos = tokenize_with_positions(text, config.tokenize_options)
    except Exception as e:
        raise IndexingError(document.id, str(e)) from e

    term_frequencies = Counter(info.term for info in token_infos)
    positions: Dict[str, List[int]] = {}
    if config.record_positions:
        for info in token_infos:
            positions.setdefault(info.term, []).append(info.position)

    return _AnalyzedDocument(
        document=document,
        length=len(token_infos),
        term_frequencies=dict(term_frequencies),
        positions=positions,
    )


class IndexBuilder:
    """Rebuilds index, statistics and document embeddings as one generation"""

    def __init__(
        self,
        document_source: DocumentSource,
        index_persistence: IndexPersistence,
        embedding_provider: Optional[EmbeddingProvider] = None,
        config: Optional[IndexBuilderConfig] = None,
    ):
        self.document_source = document_source
        self.index_persistence = index_persistence
        self.embedding_provider = embedding_provider
        self.config = config or IndexBuilderConfig()

    async def execute(self) -> BuildResult:
        """
        Run a full rebuild.

        Returns:
            BuildResult with counts of the committed generation

        Raises:
            PersistenceError: any persistence or document source failure
        """
        start_time = time.time()
        logger.info("Starting index build...")

        await self.index_persistence.clear()
        documents = await self.document_source.find_all()
        logger.info(f"Found {len(documents)} documents to index")

        unique_documents, duplicate_count = self._dedupe(documents)
        analyzed, failed_count = await self._analyze_all(unique_documents)

        index = InvertedIndex()
        stats = DocumentStatistics()
        for item in analyzed:
            doc = item.document
            stats.add_document(doc.id, length=item.length, source=doc.source, title=doc.title)
            for term, count in item.term_frequencies.items():
                index.add_posting(term, Posting(doc.id, count, item.positions.get(term, [])))
            logger.debug(f"Indexed document: {doc.id} ({len(item.term_frequencies)} unique terms)")

        embeddings = await self._embed_documents([item.document for item in analyzed])

        await self.index_persistence.save_index(index)
        await self.index_persistence.save_stats(stats)
        await self.index_persistence.save_embeddings(embeddings)
        await self.index_persistence.commit()

        result = BuildResult(
            document_count=stats.total_documents,
            unique_term_count=len(index),
            average_document_length=stats.average_document_length,
            skipped_count=duplicate_count + failed_count,
            embedded_count=len(embeddings),
            elapsed_seconds=time.time() - start_time,
        )
        logger.info(
            f"Index build completed: {result.document_count} documents, "
            f"{result.unique_term_count} unique terms, {result.skipped_count} skipped "
            f"({result.elapsed_seconds:.2f}s)"
        )
        return result

    @staticmethod
    def _dedupe(documents: List[Document]):
        seen = set()
        unique = []
        for doc in documents:
            if doc.id in seen:
                logger.warning(f"Duplicate document id {doc.id}, indexing first occurrence only")
                continue
            seen.add(doc.id)
            unique.append(doc)
        return unique, len(documents) - len(unique)

    async def _analyze_all(self, documents: List[Document]):
        if not documents:
            return [], 0

        # Run in thread pool to avoid blocking asyncio event loop
        loop = asyncio.get_running_loop()
        max_workers = max(1, min(self.config.max_workers, len(documents)))
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                loop.run_in_executor(executor, analyze_document, doc, self.config)
                for doc in documents
            ]
            results = await asyncio.gather(*futures, return_exceptions=True)

        analyzed = []
        failed = 0
        # gather preserves submission order, so merging stays in corpus order
        for doc, result in zip(documents, results):
            if isinstance(result, BaseException):
                logger.warning(f"Error indexing document {doc.id}: {result}")
                failed += 1
                continue
            analyzed.append(result)
        return analyzed, failed

    async def _embed_documents(self, documents: List[Document]) -> Dict[str, List[float]]:
        if self.embedding_provider is None or not documents:
            return {}

        embeddings: Dict[str, List[float]] = {}
        for doc in documents:
            text = f"{doc.title or ''} {(doc.content or '')[:self.config.embedding_text_chars]}".strip()
            try:
                vector = await self.embedding_provider.embed(text)
            except ProviderError as e:
                if not self.embedding_provider.is_ready():
                    # Model could not be loaded; every further call would retry the load
                    logger.warning(f"Embedding model unavailable, skipping document embeddings for this build: {e}")
                    break
                logger.warning(f"Embedding failed for document {doc.id}, lexical scoring only: {e}")
                continue
            if vector is not None:
                embeddings[doc.id] = vector

        logger.info(f"Generated {len(embeddings)} document embeddings (from {len(documents)} documents)")
        return embeddings
