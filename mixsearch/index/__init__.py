"""
Inverted index aggregates.

The builder lives in mixsearch.index.builder (it depends on the
repositories package, which in turn depends on these types).
"""

from .types import DocumentInfo, DocumentStatistics, InvertedIndex, Posting

__all__ = [
    "DocumentInfo",
    "DocumentStatistics",
    "InvertedIndex",
    "Posting",
]
