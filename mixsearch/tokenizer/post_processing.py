"""
Post-tokenization cleanup: length bounds, noise, stopwords, caps.

Accepts either plain tokens or TokenInfo(term, position) items and returns
the same shape. Positions are carried through untouched for the tokens that
survive, so offsets still refer to the stream the caller numbered.

Dedupe is off by default: duplicates are term frequency, and BM25 needs it.
"""

import math
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, NamedTuple, Optional

from .core import is_cjk_char
from .stemmer import stem
from .stopwords import DEFAULT_EN_POST_STOPWORDS, DEFAULT_ZH_POST_STOPWORDS

_PURE_LATIN = re.compile(r"^[a-z]+$")
_PURE_DIGITS = re.compile(r"^\d+$")
_REPEATED_CHAR = re.compile(r"(.)\1{6,}")


class TokenInfo(NamedTuple):
    """Token with its offset in the token stream"""
    term: str
    position: int


@dataclass(frozen=True)
class PostProcessConfig:
    """Options for post_process_tokens()"""
    remove_stopwords: bool = True
    stopwords: FrozenSet[str] = field(default=DEFAULT_EN_POST_STOPWORDS)
    remove_zh_stopwords: bool = True
    zh_stopwords: FrozenSet[str] = field(default=DEFAULT_ZH_POST_STOPWORDS)
    min_token_length: int = 1
    max_token_length: int = 64
    max_tokens: Optional[int] = None   # None = unlimited
    drop_numeric_only: bool = False
    drop_noise_tokens: bool = True
    dedupe: bool = False
    stem_latin: bool = False


def is_pure_cjk(term: str) -> bool:
    return bool(term) and all(is_cjk_char(ch) for ch in term)


def looks_like_noise(term: str) -> bool:
    """
    Noise = only punctuation/symbols/underscores, or 7+ identical chars in a row.

    Examples:
        >>> looks_like_noise("!!!!")
        True
        >>> looks_like_noise("aaaaaaaa")
        True
        >>> looks_like_noise("hello")
        False
    """
    if all(ch == "_" or unicodedata.category(ch)[0] in ("P", "S") for ch in term):
        return True
    return bool(_REPEATED_CHAR.search(term))


def _coerce_position(value) -> int:
    try:
        position = float(value)
    except (TypeError, ValueError):
        return -1
    if not math.isfinite(position):
        return -1
    return int(position)


def post_process_tokens(tokens, config: PostProcessConfig = None) -> list:
    """
    Clean, filter and cap a token stream.

    Args:
        tokens: List of str or list of TokenInfo (shape decided by the first item)
        config: Post-processing options

    Returns:
        List of the same shape as the input
    """
    if not isinstance(tokens, (list, tuple)) or not tokens:
        return []

    config = config or PostProcessConfig()
    input_is_info = isinstance(tokens[0], TokenInfo)
    seen = set() if config.dedupe else None
    out = []

    for item in tokens:
        if config.max_tokens is not None and len(out) >= config.max_tokens:
            break

        raw = item.term if input_is_info and isinstance(item, TokenInfo) else item
        if raw is None:
            continue

        term = str(raw).strip()
        if not term:
            continue

        if len(term) < config.min_token_length or len(term) > config.max_token_length:
            continue

        if config.drop_numeric_only and _PURE_DIGITS.match(term):
            continue

        if config.drop_noise_tokens and looks_like_noise(term):
            continue

        if config.remove_stopwords and _PURE_LATIN.match(term) and term in config.stopwords:
            continue
        if config.remove_zh_stopwords and is_pure_cjk(term) and term in config.zh_stopwords:
            continue

        if config.stem_latin:
            term = stem(term)

        if seen is not None:
            if term in seen:
                continue
            seen.add(term)

        if input_is_info:
            position = item.position if isinstance(item, TokenInfo) else -1
            out.append(TokenInfo(term, _coerce_position(position)))
        else:
            out.append(term)

    return out


def post_process_to_tf(tokens, config: PostProcessConfig = None) -> Dict[str, int]:
    """Post-process tokens and aggregate them into a term -> count map"""
    tf: Dict[str, int] = {}
    for item in post_process_tokens(tokens, config):
        term = item.term if isinstance(item, TokenInfo) else item
        tf[term] = tf.get(term, 0) + 1
    return tf
