"""
Abstract collaborator interfaces for documents and index persistence.

All implementations must implement these interfaces to be swappable
(PostgreSQL/GCS in production, in-memory in tests).
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, NamedTuple

from ..index.types import DocumentStatistics, InvertedIndex, Posting
from ..models import Document


class DocumentSource(ABC):
    """Read access to the document corpus"""

    @abstractmethod
    async def find_all(self) -> List[Document]:
        """Every document in the corpus"""
        pass

    async def find_by_source(self, source: str) -> List[Document]:
        documents = await self.find_all()
        if source == "all":
            return documents
        return [doc for doc in documents if doc.source == source]

    async def find_by_ids(self, document_ids: Iterable[str]) -> Dict[str, Document]:
        """
        Documents by id (used for snippets).

        Returns:
            Dict document_id -> Document; unknown ids are absent
        """
        wanted = set(document_ids)
        if not wanted:
            return {}
        return {doc.id: doc for doc in await self.find_all() if doc.id in wanted}


class IndexGeneration(NamedTuple):
    """One committed build: index, statistics and embeddings read together"""
    index: InvertedIndex
    stats: DocumentStatistics
    embeddings: Dict[str, List[float]]


class IndexPersistence(ABC):
    """
    Storage for the inverted index, document statistics and document embeddings.

    Writes go to a staged generation; readers keep seeing the committed one
    until commit() swaps the staged generation in as a unit. Readers that
    need more than one part must use get_generation(): separate get_*()
    calls may straddle a commit.
    """

    @abstractmethod
    async def clear(self):
        """Start a new staged generation (drops anything staged earlier)"""
        pass

    @abstractmethod
    async def save_index(self, index: InvertedIndex):
        pass

    @abstractmethod
    async def save_stats(self, stats: DocumentStatistics):
        pass

    @abstractmethod
    async def save_embeddings(self, embeddings: Dict[str, List[float]]):
        pass

    @abstractmethod
    async def commit(self):
        """Atomically publish the staged generation"""
        pass

    @abstractmethod
    async def get_generation(self) -> IndexGeneration:
        """Committed generation (empty parts if nothing was committed yet)"""
        pass

    async def get_index(self) -> InvertedIndex:
        return (await self.get_generation()).index

    async def get_stats(self) -> DocumentStatistics:
        return (await self.get_generation()).stats

    async def get_embeddings(self) -> Dict[str, List[float]]:
        return (await self.get_generation()).embeddings

    async def get_posting_list(self, term: str) -> List[Posting]:
        """Posting list of the committed index ([] for unknown terms)"""
        index = await self.get_index()
        return index.get_posting_list(term)
