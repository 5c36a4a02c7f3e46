"""
Unit tests for Posting, InvertedIndex and DocumentStatistics.
"""

import pytest

from mixsearch.index.types import DocumentStatistics, InvertedIndex, Posting

pytestmark = pytest.mark.unit


class TestPosting:
    """Test Posting validation and serialization"""

    def test_term_frequency_must_be_positive(self):
        """Test a term frequency below 1 is rejected"""
        with pytest.raises(ValueError):
            Posting("doc-1", 0)

    def test_dict_round_trip(self):
        """Test a posting survives to_dict/from_dict"""
        posting = Posting("doc-1", 3, [0, 4, 9])
        assert posting.to_dict() == {"doc_id": "doc-1", "tf": 3, "positions": [0, 4, 9]}
        assert Posting.from_dict(posting.to_dict()) == posting

    def test_from_dict_without_positions(self):
        """Test positions default to an empty list"""
        assert Posting.from_dict({"doc_id": 7, "tf": 1}) == Posting("7", 1, [])


class TestInvertedIndex:
    """Test InvertedIndex operations"""

    def test_add_and_get(self):
        """Test adding and reading postings"""
        index = InvertedIndex()
        index.add_posting("video", Posting("doc-1", 2))
        assert index.get_posting_list("video") == [Posting("doc-1", 2)]

    def test_missing_term_is_empty_list(self):
        """Test an unknown term has no postings"""
        assert InvertedIndex().get_posting_list("missing") == []

    def test_insertion_order(self):
        """Test postings keep insertion order"""
        index = InvertedIndex()
        index.add_posting("video", Posting("doc-2", 1))
        index.add_posting("video", Posting("doc-1", 1))
        assert [p.document_id for p in index.get_posting_list("video")] == ["doc-2", "doc-1"]

    def test_one_posting_per_document(self):
        """Test a document has one posting per term"""
        index = InvertedIndex()
        index.add_posting("video", Posting("doc-1", 1))
        index.add_posting("video", Posting("doc-2", 1))
        index.add_posting("video", Posting("doc-1", 5))
        postings = index.get_posting_list("video")
        assert postings == [Posting("doc-1", 5), Posting("doc-2", 1)]
        assert index.document_frequency("video") == 2

    def test_returned_list_is_a_copy(self):
        """Test the returned list cannot mutate the index"""
        index = InvertedIndex()
        index.add_posting("video", Posting("doc-1", 1))
        index.get_posting_list("video").clear()
        assert len(index.get_posting_list("video")) == 1

    def test_terms_and_container_protocol(self):
        """Test iteration, len and membership"""
        index = InvertedIndex()
        index.add_posting("图书", Posting("doc-1", 1))
        index.add_posting("video", Posting("doc-2", 1))
        assert index.get_all_terms() == ["图书", "video"]
        assert len(index) == 2
        assert "图书" in index
        assert list(index) == ["图书", "video"]
        assert index.document_ids() == {"doc-1", "doc-2"}

    def test_dict_round_trip(self):
        """Test an index survives to_dict/from_dict"""
        index = InvertedIndex()
        index.add_posting("video", Posting("doc-1", 2, [0, 3]))
        index.add_posting("edit", Posting("doc-1", 1, [1]))
        restored = InvertedIndex.from_dict(index.to_dict())
        assert restored.to_dict() == index.to_dict()

    def test_from_empty_dict(self):
        """Test an empty dict gives an empty index"""
        assert len(InvertedIndex.from_dict({})) == 0
        assert len(InvertedIndex.from_dict(None)) == 0


class TestDocumentStatistics:
    """Test DocumentStatistics operations"""

    def test_average_document_length(self):
        """Test the average document length"""
        stats = DocumentStatistics()
        stats.add_document("doc-1", 10, "local", "A")
        stats.add_document("doc-2", 20, "remote", "B")
        assert stats.total_documents == 2
        assert stats.average_document_length == pytest.approx(15.0)

    def test_empty(self):
        """Test empty statistics"""
        stats = DocumentStatistics()
        assert stats.total_documents == 0
        assert stats.average_document_length == 0.0
        assert stats.get_document_ids_by_source("all") == []

    def test_re_adding_replaces(self):
        """Test re-adding a document replaces it"""
        stats = DocumentStatistics()
        stats.add_document("doc-1", 10)
        stats.add_document("doc-1", 30)
        assert stats.total_documents == 1
        assert stats.average_document_length == pytest.approx(30.0)

    def test_document_info(self):
        """Test per-document info"""
        stats = DocumentStatistics()
        stats.add_document("doc-1", 12, "local", "图书馆")
        info = stats.get_document("doc-1")
        assert info.length == 12
        assert info.source == "local"
        assert info.title == "图书馆"
        assert stats.get_document("missing") is None

    def test_ids_by_source(self):
        """Test ids are listed by source"""
        stats = DocumentStatistics()
        stats.add_document("doc-1", 1, "local")
        stats.add_document("doc-2", 1, "remote")
        stats.add_document("doc-3", 1, "local")
        assert stats.get_document_ids_by_source("local") == ["doc-1", "doc-3"]
        assert stats.get_document_ids_by_source("remote") == ["doc-2"]
        assert stats.get_document_ids_by_source("all") == ["doc-1", "doc-2", "doc-3"]
        assert stats.get_document_ids_by_source("other") == []

    def test_dict_round_trip(self):
        """Test statistics survive to_dict/from_dict"""
        stats = DocumentStatistics()
        stats.add_document("doc-1", 10, "local", "A")
        stats.add_document("doc-2", 20, "remote", "B")
        data = stats.to_dict()
        assert data["total_docs"] == 2
        assert data["avg_doc_length"] == pytest.approx(15.0)
        restored = DocumentStatistics.from_dict(data)
        assert restored.to_dict() == data
