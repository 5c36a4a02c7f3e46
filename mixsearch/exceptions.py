"""
Error types raised at collaborator boundaries.

The tokenization pipeline never raises on bad input (it returns empty
results), so everything here comes from I/O: persistence, the document
source and the embedding model.
"""


class MixSearchError(Exception):
    """Base class for mixsearch errors"""


class PersistenceError(MixSearchError):
    """Index persistence or document source failed (clear/save/get/find)

    Aborts the current build or search: continuing would mix generations.
    """


class ProviderError(MixSearchError):
    """Embedding model could not be loaded or called"""


class IndexingError(MixSearchError):
    """A single document could not be tokenized or recorded"""

    def __init__(self, document_id: str, message: str):
        super().__init__(f"Failed to index document {document_id}: {message}")
        self.document_id = document_id
