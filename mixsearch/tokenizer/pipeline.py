"""
Tokenization entry point: text -> tokens or term-frequency stats.

Pipeline:
    normalize -> chunk -> core tokenize -> policy filter -> post-process

Two modes:
- document (indexing): one core pass at the configured cjk_mode (bigram)
- query (search): two core passes, char and bigram, filtered and
  post-processed independently, then merged:
    tokens = ordered union of both passes
    tf     = tf(char pass) + query_bigram_weight * tf(bigram pass)

Short CJK queries need both granularities for recall ("书" must match a
document indexed with "图书"/"书馆" bigrams and single chars), while the
corpus is indexed only once.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Union

from .chunking import ChunkingConfig, chunk_text
from .core import CoreTokenizerConfig, tokenize_mixed
from .normalization import NormalizationConfig, normalize_text
from .policy import PolicyConfig, apply_policy
from .post_processing import PostProcessConfig, TokenInfo, post_process_tokens

logger = logging.getLogger(__name__)

DOCUMENT_MODE = "document"
QUERY_MODE = "query"


@dataclass(frozen=True)
class TokenizeOptions:
    """
    Options for tokenize().

    Core and policy switches are flat (they differ per call site); the
    normalization, chunking and post-processing stages take their own config.
    """
    mode: str = DOCUMENT_MODE            # "document" | "query"
    cjk_mode: str = "bigram"             # document mode only
    keep_cjk_singles: bool = True
    lower_case_latin: bool = True
    split_camel: bool = True
    min_token_length: int = 1
    keep_joined_latin: bool = True
    keep_split_latin_parts: bool = False
    enable_stopwords: bool = False
    keep_numbers: bool = True
    drop_cjk_noise_bigrams: bool = True
    query_bigram_weight: float = 1.0
    # Case folding happens in the core tokenizer, after camelCase splitting
    normalization: NormalizationConfig = field(default_factory=lambda: NormalizationConfig(lower_case=False))
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)
    # The policy filter owns stopwords; the post-processor only cleans
    post: PostProcessConfig = field(
        default_factory=lambda: PostProcessConfig(remove_stopwords=False, remove_zh_stopwords=False)
    )

    def core_config(self, cjk_mode: str) -> CoreTokenizerConfig:
        return CoreTokenizerConfig(
            cjk_mode=cjk_mode,
            keep_cjk_singles=self.keep_cjk_singles,
            lower_case_latin=self.lower_case_latin,
            split_camel=self.split_camel,
            min_token_length=self.min_token_length,
            emit_joined_latin=self.keep_joined_latin,
            emit_split_latin=self.keep_split_latin_parts,
        )

    def policy_config(self) -> PolicyConfig:
        return PolicyConfig(
            enable_stopwords=self.enable_stopwords,
            keep_numbers=self.keep_numbers,
            drop_cjk_noise_bigrams=self.drop_cjk_noise_bigrams,
        )


@dataclass
class TokenStats:
    """Term-frequency view of a tokenized text"""
    tf: Dict[str, float] = field(default_factory=dict)
    length: int = 0
    unique_terms: int = 0
    tokens: List[str] = field(default_factory=list)


def term_frequencies(tokens: List[str]) -> Dict[str, int]:
    """Aggregate a token stream into term -> count (insertion ordered)"""
    tf: Dict[str, int] = {}
    for token in tokens:
        tf[token] = tf.get(token, 0) + 1
    return tf


def merge_term_frequencies(tf_a: Dict[str, float], tf_b: Dict[str, float], weight_b: float = 1.0) -> Dict[str, float]:
    merged: Dict[str, float] = dict(tf_a)
    for term, count in tf_b.items():
        merged[term] = merged.get(term, 0) + count * weight_b
    return merged


def tf_cosine_similarity(tf_a: Dict[str, float], tf_b: Dict[str, float]) -> float:
    """
    Cosine similarity of two term-frequency maps.

    Returns:
        Similarity in [0, 1]; 0 when either map is empty
    """
    if not tf_a or not tf_b:
        return 0.0
    dot = sum(count * tf_b[term] for term, count in tf_a.items() if term in tf_b)
    norm_a = math.sqrt(sum(c * c for c in tf_a.values()))
    norm_b = math.sqrt(sum(c * c for c in tf_b.values()))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


def _chunks(text: str, options: TokenizeOptions) -> List[str]:
    normalized = normalize_text(text, options.normalization)
    return chunk_text(normalized, options.chunking)


def _model_tokens(chunks: List[str], options: TokenizeOptions, cjk_mode: str) -> List[str]:
    core = options.core_config(cjk_mode)
    raw: List[str] = []
    for chunk in chunks:
        raw.extend(tokenize_mixed(chunk, core))
    return apply_policy(raw, options.policy_config())


def _empty(output: str):
    return TokenStats() if output == "stats" else []


def tokenize(text, options: TokenizeOptions = None, output: str = "tokens") -> Union[List[str], TokenStats]:
    """
    Tokenize text in document or query mode.

    Args:
        text: Raw text (None / non-string / empty are handled, never raise)
        options: TokenizeOptions (default: document mode, CJK bigrams)
        output: "tokens" for a token list, "stats" for TokenStats

    Returns:
        List of tokens, or TokenStats(tf, length, unique_terms, tokens)

    Examples:
        >>> tokenize("CSC207是的是的是的", output="stats").length
        8

        >>> tokenize("图书馆", TokenizeOptions(mode="query"))
        ['图', '书', '馆', '图书', '书馆']
    """
    if text is None or (isinstance(text, str) and not text):
        return _empty(output)

    options = options or TokenizeOptions()
    chunks = _chunks(text, options)
    if not chunks:
        return _empty(output)

    if options.mode == QUERY_MODE:
        char_tokens = post_process_tokens(_model_tokens(chunks, options, "char"), options.post)
        bigram_tokens = post_process_tokens(_model_tokens(chunks, options, "bigram"), options.post)

        tokens = list(dict.fromkeys(char_tokens + bigram_tokens))
        if output != "stats":
            return tokens

        tf = merge_term_frequencies(
            term_frequencies(char_tokens),
            term_frequencies(bigram_tokens),
            options.query_bigram_weight,
        )
        return TokenStats(tf=tf, length=len(tokens), unique_terms=len(tf), tokens=tokens)

    if options.mode != DOCUMENT_MODE:
        logger.debug(f"Unknown tokenize mode {options.mode!r}, using document mode")

    tokens = post_process_tokens(_model_tokens(chunks, options, options.cjk_mode), options.post)
    if output != "stats":
        return tokens

    tf = term_frequencies(tokens)
    return TokenStats(tf=tf, length=len(tokens), unique_terms=len(tf), tokens=tokens)


def tokenize_with_positions(text, options: TokenizeOptions = None) -> List[TokenInfo]:
    """
    Document-mode tokenization that keeps token offsets.

    Positions are offsets in the policy-filtered stream, before
    post-processing removes anything, so they are stable across
    post-processing settings.
    """
    if text is None or (isinstance(text, str) and not text):
        return []

    options = replace(options or TokenizeOptions(), mode=DOCUMENT_MODE)
    chunks = _chunks(text, options)
    if not chunks:
        return []

    model_tokens = _model_tokens(chunks, options, options.cjk_mode)
    infos = [TokenInfo(term, position) for position, term in enumerate(model_tokens)]
    return post_process_tokens(infos, options.post)
