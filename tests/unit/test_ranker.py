"""
Unit tests for the hybrid ranker.
"""

from unittest.mock import AsyncMock

import pytest

from mixsearch.exceptions import PersistenceError
from mixsearch.index.builder import IndexBuilder
from mixsearch.models import Document
from mixsearch.repositories import InMemoryDocumentSource, InMemoryIndexPersistence
from mixsearch.search import BM25, Ranker, RankerConfig, SearchOptions

pytestmark = pytest.mark.unit


async def build(document_source, index_persistence, provider=None):
    await IndexBuilder(document_source, index_persistence, provider).execute()


class TestLexicalRanking:
    """Test BM25-only ranking"""

    @pytest.mark.asyncio
    async def test_more_occurrences_rank_first(self, document_source, index_persistence):
        """Test higher term frequency ranks first"""
        await build(document_source, index_persistence)
        response = await Ranker(index_persistence, document_source).search("video")

        assert [r.doc_id for r in response.results] == ["doc-4", "doc-3"]
        assert response.results[0].score == pytest.approx(1.0)
        assert response.results[0].bm25_score == pytest.approx(1.0)
        assert response.results[0].embedding_score == 0.0
        assert response.total_results == 2
        assert response.elapsed.endswith("ms")

    @pytest.mark.asyncio
    async def test_scope_local_never_returns_remote(self, document_source, index_persistence):
        """Test scope local only returns local documents"""
        await build(document_source, index_persistence)
        ranker = Ranker(index_persistence, document_source)

        response = await ranker.search("Kubernetes 图书馆 video", scope="local")
        assert {r.doc_id for r in response.results} == {"doc-1", "doc-2"}
        assert all(r.source == "local" for r in response.results)

        response = await ranker.search("video", scope="local")
        assert response.results == []

    @pytest.mark.asyncio
    async def test_scope_remote(self, document_source, index_persistence):
        """Test scope remote excludes local documents"""
        await build(document_source, index_persistence)
        response = await Ranker(index_persistence, document_source).search("图书馆", scope="remote")
        assert response.total_results == 0
        assert response.scope == "remote"

    @pytest.mark.asyncio
    async def test_unknown_scope_is_empty(self, document_source, index_persistence):
        """Test an unknown scope matches nothing"""
        await build(document_source, index_persistence)
        response = await Ranker(index_persistence, document_source).search("video", scope="archive")
        assert response.results == []

    @pytest.mark.asyncio
    async def test_empty_query(self, document_source, index_persistence):
        """Test blank and punctuation-only queries return nothing"""
        await build(document_source, index_persistence)
        ranker = Ranker(index_persistence, document_source)
        assert (await ranker.search("")).total_results == 0
        assert (await ranker.search("   ")).total_results == 0
        assert (await ranker.search("!!!")).total_results == 0

    @pytest.mark.asyncio
    async def test_no_matches(self, document_source, index_persistence):
        """Test a query with no matching terms"""
        await build(document_source, index_persistence)
        response = await Ranker(index_persistence, document_source).search("blockchain")
        assert response.results == []

    @pytest.mark.asyncio
    async def test_before_first_build(self, document_source, index_persistence):
        """Test searching before any commit"""
        response = await Ranker(index_persistence, document_source).search("video")
        assert response.results == []

    @pytest.mark.asyncio
    async def test_ties_break_by_doc_id(self, index_persistence):
        """Test equal scores are ordered by document id"""
        source = InMemoryDocumentSource([
            Document(id="b", content="shared pipeline words"),
            Document(id="a", content="shared pipeline words"),
            Document(id="c", content="unrelated content"),
        ])
        await build(source, index_persistence)
        response = await Ranker(index_persistence, source).search("pipeline")

        assert [r.doc_id for r in response.results] == ["a", "b"]
        assert response.results[0].score == response.results[1].score

    @pytest.mark.asyncio
    async def test_top_k(self, document_source, index_persistence):
        """Test results are cut to top_k"""
        await build(document_source, index_persistence)
        response = await Ranker(index_persistence, document_source).search("video", options=SearchOptions(top_k=1))
        assert [r.doc_id for r in response.results] == ["doc-4"]

    @pytest.mark.asyncio
    async def test_cjk_query_snippet_and_title(self, document_source, index_persistence):
        """Test CJK queries return title and snippet"""
        await build(document_source, index_persistence)
        response = await Ranker(index_persistence, document_source).search("图书馆")

        top = response.results[0]
        assert top.doc_id == "doc-2"
        assert top.title == "图书馆"
        assert "图书馆开放时间" in top.snippet

    @pytest.mark.asyncio
    async def test_idf_uses_whole_corpus(self, document_source, index_persistence):
        """Restricting the scope does not change document frequencies"""
        await build(document_source, index_persistence)
        ranker = Ranker(index_persistence, document_source)
        index = await index_persistence.get_index()
        stats = await index_persistence.get_stats()

        scores = ranker._lexical_scores(["video"], index, stats, {"doc-3"})

        scorer = BM25()
        expected = scorer.idf(2, 4) * scorer.term_score(
            1, stats.get_document("doc-3").length, stats.average_document_length
        )
        assert scores == {"doc-3": pytest.approx(expected)}

    @pytest.mark.asyncio
    async def test_persistence_error_propagates(self, document_source):
        """Test read errors propagate from the ranker"""
        persistence = InMemoryIndexPersistence()
        persistence.get_generation = AsyncMock(side_effect=PersistenceError("bucket unavailable"))

        with pytest.raises(PersistenceError):
            await Ranker(persistence, document_source).search("video")

    @pytest.mark.asyncio
    async def test_lexical_scores_match_bm25_score(self, document_source, index_persistence):
        """Test the ranker's lexical scores are BM25.score over the stored postings"""
        await build(document_source, index_persistence)
        ranker = Ranker(index_persistence, document_source)
        index, stats, _ = await index_persistence.get_generation()
        query_terms = ["video", "machine", "机器"]

        scores = ranker._lexical_scores(query_terms, index, stats, {"doc-3", "doc-4"})

        df = {term: len(index.get_posting_list(term)) for term in query_terms if term in index}
        for doc_id in ("doc-3", "doc-4"):
            doc_tf = {
                term: posting.term_frequency
                for term in query_terms
                for posting in index.get_posting_list(term)
                if posting.document_id == doc_id
            }
            expected = BM25().score(
                query_terms, doc_tf, stats.get_document(doc_id).length,
                stats.average_document_length, df, stats.total_documents,
            )
            assert scores[doc_id] == pytest.approx(expected)

    @pytest.mark.asyncio
    async def test_one_snapshot_per_search(self, document_source, index_persistence, fake_provider):
        """Test a search reads the committed generation once and never part by part"""
        provider = fake_provider({}, default=[1.0, 0.0])
        await build(document_source, index_persistence, provider)
        index_persistence.get_generation = AsyncMock(wraps=index_persistence.get_generation)
        index_persistence.get_index = AsyncMock(side_effect=AssertionError("partial read"))
        index_persistence.get_stats = AsyncMock(side_effect=AssertionError("partial read"))
        index_persistence.get_embeddings = AsyncMock(side_effect=AssertionError("partial read"))

        response = await Ranker(index_persistence, document_source, provider).search("video")

        assert response.total_results == 2
        index_persistence.get_generation.assert_awaited_once()


class TestHybridRanking:
    """Test BM25 and embedding score fusion"""

    @pytest.mark.asyncio
    async def test_semantic_match_without_lexical_overlap(self, document_source, index_persistence, fake_provider):
        """Test a purely semantic match is returned"""
        provider = fake_provider({"Kubernetes": [1.0, 0.0], "orchestration": [1.0, 0.0]}, default=[0.0, 1.0])
        await build(document_source, index_persistence, provider)

        response = await Ranker(index_persistence, document_source, provider).search("orchestration")

        assert [r.doc_id for r in response.results] == ["doc-1"]
        assert response.results[0].score == pytest.approx(0.5)
        assert response.results[0].bm25_score == 0.0
        assert response.results[0].embedding_score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_alpha_weights_families(self, document_source, index_persistence, fake_provider):
        """Test alpha weights lexical against semantic scores"""
        provider = fake_provider({"Kubernetes": [1.0, 0.0], "orchestration": [1.0, 0.0]}, default=[0.0, 1.0])
        await build(document_source, index_persistence, provider)
        ranker = Ranker(index_persistence, document_source, provider, RankerConfig(alpha=0.8))

        response = await ranker.search("orchestration")
        assert response.results[0].score == pytest.approx(0.2)

        response = await ranker.search("orchestration", options=SearchOptions(alpha=0.0))
        assert response.results[0].score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_provider_error_falls_back_to_lexical(self, document_source, index_persistence, fake_provider):
        """Test provider errors fall back to BM25 only"""
        provider = fake_provider({}, default=[1.0, 0.0])
        await build(document_source, index_persistence, provider)
        provider.fail = True

        response = await Ranker(index_persistence, document_source, provider).search("video")

        assert [r.doc_id for r in response.results] == ["doc-4", "doc-3"]
        assert response.results[0].score == pytest.approx(1.0)
        assert all(r.embedding_score == 0.0 for r in response.results)

    @pytest.mark.asyncio
    async def test_use_embedding_disabled(self, document_source, index_persistence, fake_provider):
        """Test use_embedding=False never calls the provider"""
        provider = fake_provider({}, default=[1.0, 0.0])
        await build(document_source, index_persistence, provider)
        calls_after_build = len(provider.calls)

        ranker = Ranker(index_persistence, document_source, provider)
        response = await ranker.search("video", options=SearchOptions(use_embedding=False))

        assert len(provider.calls) == calls_after_build
        assert [r.doc_id for r in response.results] == ["doc-4", "doc-3"]

    @pytest.mark.asyncio
    async def test_precomputed_query_embedding(self, document_source, index_persistence, fake_provider):
        """Test a supplied query embedding is used without a provider"""
        provider = fake_provider({"Kubernetes": [1.0, 0.0]}, default=[0.0, 1.0])
        await build(document_source, index_persistence, provider)

        ranker = Ranker(index_persistence, document_source)  # no provider at query time
        response = await ranker.search("orchestration", query_embedding=[1.0, 0.0])
        assert [r.doc_id for r in response.results] == ["doc-1"]

    @pytest.mark.asyncio
    async def test_negative_cosine_counts_as_zero(self, index_persistence, fake_provider):
        """Test negative similarity does not produce a result"""
        source = InMemoryDocumentSource([
            Document(id="pos", content="alpha text"),
            Document(id="neg", content="omega text"),
        ])
        provider = fake_provider({"alpha": [1.0, 0.0], "omega": [-1.0, 0.0], "query": [1.0, 0.0]})
        await build(source, index_persistence, provider)

        response = await Ranker(index_persistence, source, provider).search("query")
        assert [r.doc_id for r in response.results] == ["pos"]

    @pytest.mark.asyncio
    async def test_no_document_embeddings_is_lexical_only(self, document_source, index_persistence, fake_provider):
        """Test an index without embeddings ranks lexically"""
        await build(document_source, index_persistence)  # built without embeddings
        provider = fake_provider({}, default=[1.0, 0.0])

        response = await Ranker(index_persistence, document_source, provider).search("video")
        assert response.results[0].score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_commit_during_search_does_not_mix_generations(self, document_source, index_persistence, fake_provider):
        """Test a rebuild committed mid-search leaves the running search on its snapshot"""
        provider = fake_provider({"Kubernetes": [1.0, 0.0], "orchestration": [1.0, 0.0]}, default=[0.0, 1.0])
        await build(document_source, index_persistence, provider)
        original_embed = provider.embed

        async def embed_and_rebuild(text):
            if text == "Kubernetes orchestration":
                await build(InMemoryDocumentSource([Document(id="other", content="unrelated")]), index_persistence)
            return await original_embed(text)

        provider.embed = embed_and_rebuild
        response = await Ranker(index_persistence, document_source, provider).search("Kubernetes orchestration")

        top = response.results[0]
        assert top.doc_id == "doc-1"
        assert top.bm25_score == pytest.approx(1.0)
        assert top.embedding_score == pytest.approx(1.0)
        assert top.title == "Kubernetes 部署"
        assert "other" in await index_persistence.get_stats()
