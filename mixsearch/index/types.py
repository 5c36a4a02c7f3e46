"""
Inverted index data structures.

- Posting: one document's entry in a term's posting list
- InvertedIndex: term -> posting list (insertion order)
- DocumentStatistics: per-document length/source/title + corpus averages (BM25)

These are in-memory aggregates. to_dict()/from_dict() exist only for the
persistence boundary (JSON blobs in GCS); nothing else should depend on the
serialized shape.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


@dataclass
class Posting:
    """Single entry in a posting list"""
    document_id: str
    term_frequency: int
    positions: List[int] = field(default_factory=list)

    def __post_init__(self):
        if self.term_frequency < 1:
            raise ValueError(f"term_frequency must be >= 1, got {self.term_frequency}")

    def to_dict(self) -> dict:
        return {
            "doc_id": self.document_id,
            "tf": self.term_frequency,
            "positions": list(self.positions),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Posting":
        return cls(
            document_id=str(data["doc_id"]),
            term_frequency=int(data["tf"]),
            positions=[int(p) for p in data.get("positions") or []],
        )


class InvertedIndex:
    """
    Maps terms to posting lists.

    At most one posting per document per term: adding a posting for a
    document that is already in the list replaces the old one in place.
    """

    def __init__(self):
        self._postings: Dict[str, List[Posting]] = {}
        # term -> {document_id: slot in the posting list}
        self._slots: Dict[str, Dict[str, int]] = {}

    def add_posting(self, term: str, posting: Posting):
        postings = self._postings.setdefault(term, [])
        slots = self._slots.setdefault(term, {})

        slot = slots.get(posting.document_id)
        if slot is not None:
            postings[slot] = posting
            return

        slots[posting.document_id] = len(postings)
        postings.append(posting)

    def get_posting_list(self, term: str) -> List[Posting]:
        """Posting list for a term (empty list for unknown terms, never None)"""
        return list(self._postings.get(term, ()))

    def document_frequency(self, term: str) -> int:
        return len(self._postings.get(term, ()))

    def get_all_terms(self) -> List[str]:
        return list(self._postings)

    def document_ids(self) -> set:
        ids = set()
        for slots in self._slots.values():
            ids.update(slots)
        return ids

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, term: str) -> bool:
        return term in self._postings

    def __iter__(self) -> Iterator[str]:
        return iter(self._postings)

    def to_dict(self) -> dict:
        return {
            term: [posting.to_dict() for posting in postings]
            for term, postings in self._postings.items()
        }

    @classmethod
    def from_dict(cls, data: dict) -> "InvertedIndex":
        index = cls()
        for term, postings in (data or {}).items():
            for posting in postings:
                index.add_posting(term, Posting.from_dict(posting))
        return index


@dataclass(frozen=True)
class DocumentInfo:
    """Per-document statistics"""
    length: int
    source: str
    title: str

    def to_dict(self) -> dict:
        return {"length": self.length, "source": self.source, "title": self.title}


class DocumentStatistics:
    """
    Corpus statistics for BM25.

    average_document_length = sum(length) / total_documents (0 when empty),
    kept current on every add_document() call.
    """

    def __init__(self):
        self._documents: Dict[str, DocumentInfo] = {}
        self._total_length = 0
        self.total_documents = 0
        self.average_document_length = 0.0

    def add_document(self, document_id: str, length: int, source: str = "", title: str = ""):
        previous = self._documents.get(document_id)
        if previous is not None:
            self._total_length -= previous.length

        length = max(int(length), 0)
        self._documents[document_id] = DocumentInfo(length=length, source=source or "", title=title or "")
        self._total_length += length
        self._recalculate()

    def _recalculate(self):
        self.total_documents = len(self._documents)
        if self.total_documents > 0:
            self.average_document_length = self._total_length / self.total_documents
        else:
            self.average_document_length = 0.0

    def get_document(self, document_id: str) -> Optional[DocumentInfo]:
        return self._documents.get(document_id)

    def get_document_ids_by_source(self, source: str) -> List[str]:
        """Document ids for a scope ("all" returns every document)"""
        if source == "all":
            return list(self._documents)
        return [doc_id for doc_id, info in self._documents.items() if info.source == source]

    def __contains__(self, document_id: str) -> bool:
        return document_id in self._documents

    def __len__(self) -> int:
        return self.total_documents

    def to_dict(self) -> dict:
        return {
            "total_docs": self.total_documents,
            "avg_doc_length": self.average_document_length,
            "docs": {doc_id: info.to_dict() for doc_id, info in self._documents.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentStatistics":
        stats = cls()
        for doc_id, info in ((data or {}).get("docs") or {}).items():
            stats.add_document(
                doc_id,
                length=info.get("length", 0),
                source=info.get("source", ""),
                title=info.get("title", ""),
            )
        return stats
