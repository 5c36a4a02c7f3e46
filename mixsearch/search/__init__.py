"""
Ranked retrieval over the inverted index.

Components:
- scorer: BM25 with corpus-wide IDF
- fusion: divide-by-max normalization and alpha blend of lexical + semantic scores
- snippet: match-centred result snippets
- ranker: end-to-end search (tokenize query, score, blend, sort)
"""

from .scorer import BM25
from .fusion import BlendedScore, blend_scores, normalize_scores
from .snippet import generate_snippet
from .ranker import Ranker, RankerConfig, SearchOptions

__all__ = [
    "BM25",
    "BlendedScore",
    "blend_scores",
    "normalize_scores",
    "generate_snippet",
    "Ranker",
    "RankerConfig",
    "SearchOptions",
]
