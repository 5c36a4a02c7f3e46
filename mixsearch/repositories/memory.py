"""In-memory collaborators (tests, local experiments)"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..index.types import DocumentStatistics, InvertedIndex
from ..models import Document
from .base import DocumentSource, IndexGeneration, IndexPersistence

logger = logging.getLogger(__name__)


class InMemoryDocumentSource(DocumentSource):
    """Document source backed by a list"""

    def __init__(self, documents: Optional[Iterable[Document]] = None):
        self.documents: List[Document] = list(documents or [])

    def add(self, document: Document):
        self.documents.append(document)

    async def find_all(self) -> List[Document]:
        return list(self.documents)


@dataclass
class _Generation:
    index: InvertedIndex = field(default_factory=InvertedIndex)
    stats: DocumentStatistics = field(default_factory=DocumentStatistics)
    embeddings: Dict[str, List[float]] = field(default_factory=dict)


class InMemoryIndexPersistence(IndexPersistence):
    """
    Two-generation in-memory store.

    The committed generation is replaced by a single reference assignment,
    so a reader never observes an index from one build with statistics
    from another.
    """

    def __init__(self):
        self._committed = _Generation()
        self._staged: Optional[_Generation] = None
        self.commit_count = 0

    def _stage(self) -> _Generation:
        if self._staged is None:
            self._staged = _Generation()
        return self._staged

    async def clear(self):
        self._staged = _Generation()
        logger.debug("Cleared staged index generation")

    async def save_index(self, index: InvertedIndex):
        self._stage().index = index

    async def save_stats(self, stats: DocumentStatistics):
        self._stage().stats = stats

    async def save_embeddings(self, embeddings: Dict[str, List[float]]):
        self._stage().embeddings = dict(embeddings)

    async def commit(self):
        generation = self._stage()
        self._committed = generation
        self._staged = None
        self.commit_count += 1
        logger.debug(f"Committed index generation #{self.commit_count}: {len(generation.index)} terms")

    async def get_generation(self) -> IndexGeneration:
        # One reference read: the parts always come from the same commit
        generation = self._committed
        return IndexGeneration(generation.index, generation.stats, generation.embeddings)
