"""
Hybrid ranker: BM25 over the committed inverted index, optionally blended
with cosine similarity against precomputed document embeddings.

Search flow:
    1. Tokenize query (query mode: CJK singles + bigrams)
    2. Candidates = documents in scope (per DocumentStatistics)
    3. BM25 for candidate postings (IDF from the whole corpus)
    4. Cosine(query embedding, document embedding) if enabled and available
    5. Normalize each family by its max, blend with alpha
    6. Drop score <= 0, sort (score desc, doc_id asc), cut top_k
"""

import logging
import time
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from ..embedding.base import EmbeddingProvider, cosine_similarity
from ..exceptions import ProviderError
from ..index.types import DocumentStatistics, InvertedIndex
from ..models import SearchResponse, SearchResult
from ..repositories.base import DocumentSource, IndexPersistence
from ..tokenizer import QUERY_MODE, TokenizeOptions, tokenize
from .fusion import blend_scores
from .scorer import BM25
from .snippet import generate_snippet

logger = logging.getLogger(__name__)


class RankerConfig(BaseModel):
    k1: float = Field(default=1.2, gt=0, description="BM25 term frequency saturation")
    b: float = Field(default=0.75, ge=0, le=1, description="BM25 length normalization")
    alpha: float = Field(default=0.5, ge=0, le=1, description="Lexical weight in the blend")
    use_embedding: bool = Field(default=True, description="Blend semantic scores when a provider is configured")
    snippet_length: int = Field(default=150, gt=0)


class SearchOptions(BaseModel):
    """Per-request overrides (None = use RankerConfig)"""
    alpha: Optional[float] = Field(default=None, ge=0, le=1)
    use_embedding: Optional[bool] = None
    top_k: Optional[int] = Field(default=None, ge=1)


class Ranker:
    def __init__(
        self,
        index_persistence: IndexPersistence,
        document_source: DocumentSource,
        embedding_provider: Optional[EmbeddingProvider] = None,
        config: Optional[RankerConfig] = None,
        tokenize_options: Optional[TokenizeOptions] = None,
    ):
        self.index_persistence = index_persistence
        self.document_source = document_source
        self.embedding_provider = embedding_provider
        self.config = config or RankerConfig()
        # Query tokenization must match the builder's options apart from the mode
        self.tokenize_options = replace(tokenize_options or TokenizeOptions(), mode=QUERY_MODE)
        self.scorer = BM25(k1=self.config.k1, b=self.config.b)

    async def search(
        self,
        query: str,
        scope: str = "all",
        options: Optional[SearchOptions] = None,
        query_embedding: Optional[Sequence[float]] = None,
    ) -> SearchResponse:
        """
        Rank documents in `scope` against `query`.

        Args:
            query: Raw query text
            scope: Document source to search ("local", "remote", ...) or "all"
            options: Per-request alpha / use_embedding / top_k
            query_embedding: Precomputed query vector (skips the provider call)

        Returns:
            SearchResponse (empty results for empty queries or scopes)

        Raises:
            PersistenceError: index or document lookup failed
        """
        start_time = time.time()
        options = options or SearchOptions()
        alpha = self.config.alpha if options.alpha is None else options.alpha
        use_embedding = self.config.use_embedding if options.use_embedding is None else options.use_embedding

        if not query or not query.strip():
            return self._response(query or "", scope, [], start_time)

        query_stats = tokenize(query, self.tokenize_options, output="stats")
        query_terms = list(query_stats.tf)
        logger.debug(f"Query tokens: {query_stats.tokens}")
        if not query_terms:
            return self._response(query, scope, [], start_time)

        # Single snapshot: postings, statistics and embeddings of one commit
        index, stats, document_embeddings = await self.index_persistence.get_generation()
        candidates = set(stats.get_document_ids_by_source(scope))
        if not candidates:
            return self._response(query, scope, [], start_time)

        logger.info(f"Searching '{query}' in {len(candidates)} documents (scope: {scope})")

        lexical = self._lexical_scores(query_terms, index, stats, candidates)

        semantic = None
        if use_embedding:
            semantic = await self._semantic_scores(query, candidates, document_embeddings, query_embedding)

        blended = blend_scores(lexical, semantic, alpha)
        ranked = sorted(
            ((doc_id, item) for doc_id, item in blended.items() if item.score > 0),
            key=lambda pair: (-pair[1].score, pair[0]),
        )
        if options.top_k is not None:
            ranked = ranked[:options.top_k]

        documents = await self.document_source.find_by_ids([doc_id for doc_id, _ in ranked]) if ranked else {}

        results = []
        for doc_id, item in ranked:
            info = stats.get_document(doc_id)
            document = documents.get(doc_id)
            content = document.content if document is not None else ""
            results.append(SearchResult(
                doc_id=doc_id,
                title=info.title if info is not None else (document.title if document else ""),
                snippet=generate_snippet(content, query_stats.tokens, self.config.snippet_length),
                score=round(item.score, 4),
                bm25_score=round(item.lexical, 4),
                embedding_score=round(item.semantic, 4),
                source=info.source if info is not None else scope,
            ))

        response = self._response(query, scope, results, start_time)
        logger.info(f"Found {response.total_results} results in {response.elapsed}")
        return response

    def _lexical_scores(
        self,
        query_terms: List[str],
        index: InvertedIndex,
        stats: DocumentStatistics,
        candidates: set,
    ) -> Dict[str, float]:
        """Raw BM25 per candidate; postings outside the scope are skipped"""
        document_frequencies: Dict[str, int] = {}
        matched: Dict[str, Dict[str, int]] = {}
        for term in query_terms:
            postings = index.get_posting_list(term)
            if not postings:
                continue
            # df over the whole corpus, not just the scope
            document_frequencies[term] = len(postings)
            for posting in postings:
                if posting.document_id in candidates:
                    matched.setdefault(posting.document_id, {})[term] = posting.term_frequency

        scores: Dict[str, float] = {}
        for doc_id, doc_tf in matched.items():
            info = stats.get_document(doc_id)
            scores[doc_id] = self.scorer.score(
                query_terms,
                doc_tf,
                doc_length=info.length if info is not None else 0,
                avg_doc_length=stats.average_document_length,
                document_frequencies=document_frequencies,
                total_documents=stats.total_documents,
            )
        return scores

    async def _semantic_scores(
        self,
        query: str,
        candidates: set,
        document_embeddings: Dict[str, List[float]],
        query_embedding: Optional[Sequence[float]],
    ) -> Optional[Dict[str, float]]:
        """Cosine per candidate, or None when semantic scoring is unavailable"""
        if not document_embeddings:
            logger.debug("Index has no document embeddings, using BM25 only")
            return None

        if query_embedding is None:
            if self.embedding_provider is None:
                return None
            try:
                query_embedding = await self.embedding_provider.embed(query)
            except ProviderError as e:
                logger.warning(f"Embedding failed, using BM25 only: {e}")
                return None
            if query_embedding is None:
                return None

        scores = {
            doc_id: cosine_similarity(query_embedding, vector)
            for doc_id, vector in document_embeddings.items()
            if doc_id in candidates
        }
        if not scores:
            logger.debug("No document embeddings in scope, using BM25 only")
            return None
        return scores

    @staticmethod
    def _response(query: str, scope: str, results: List[SearchResult], start_time: float) -> SearchResponse:
        elapsed_ms = int((time.time() - start_time) * 1000)
        return SearchResponse(
            query=query,
            scope=scope,
            total_results=len(results),
            elapsed=f"{elapsed_ms}ms",
            results=results,
        )
