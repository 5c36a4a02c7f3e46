"""
Mixed-script (Latin/CJK) tokenization pipeline.

Stages:
- normalization: unicode / case / whitespace canonicalization
- chunking: sentence and separator bounded chunks
- core: single-pass Latin + CJK scanner (span / char / bigram)
- policy: stopwords, numerals, CJK noise bigrams
- post_processing: length, noise, caps, optional stemming and dedupe
- pipeline: document / query mode entry point and TF aggregation
"""

from .normalization import NormalizationConfig, normalize_text
from .chunking import ChunkingConfig, chunk_text
from .core import CoreTokenizerConfig, tokenize_mixed, split_camel_case
from .policy import PolicyConfig, apply_policy
from .post_processing import PostProcessConfig, TokenInfo, post_process_tokens, post_process_to_tf
from .stemmer import stem
from .pipeline import (
    DOCUMENT_MODE,
    QUERY_MODE,
    TokenizeOptions,
    TokenStats,
    tokenize,
    tokenize_with_positions,
    term_frequencies,
    tf_cosine_similarity,
)

__all__ = [
    "NormalizationConfig",
    "normalize_text",
    "ChunkingConfig",
    "chunk_text",
    "CoreTokenizerConfig",
    "tokenize_mixed",
    "split_camel_case",
    "PolicyConfig",
    "apply_policy",
    "PostProcessConfig",
    "TokenInfo",
    "post_process_tokens",
    "post_process_to_tf",
    "stem",
    "DOCUMENT_MODE",
    "QUERY_MODE",
    "TokenizeOptions",
    "TokenStats",
    "tokenize",
    "tokenize_with_positions",
    "term_frequencies",
    "tf_cosine_similarity",
]
