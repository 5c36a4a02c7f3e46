"""
Lexical policy filter applied to raw core-tokenizer output.

Order:
1. Drop pure numerals (unless keep_numbers)
2. Drop stopwords - English set for pure lowercase Latin tokens,
   CJK set for tokens starting with a CJK character (when enabled)
3. Drop CJK bigrams made of two noise characters ("的是", "我们"); "图书"
   or "好的" survive because at least one side is a content character
"""

import re
from dataclasses import dataclass
from typing import List

from .core import is_cjk_char
from .stopwords import CJK_NOISE_CHARS, STOPWORDS_EN, STOPWORDS_ZH

_PURE_LATIN = re.compile(r"^[a-z]+$")
_PURE_DIGITS = re.compile(r"^\d+$")


@dataclass(frozen=True)
class PolicyConfig:
    """Options for apply_policy()"""
    enable_stopwords: bool = False
    keep_numbers: bool = True
    drop_cjk_noise_bigrams: bool = True


def looks_like_cjk(token: str) -> bool:
    return bool(token) and is_cjk_char(token[0])


def is_cjk_noise_bigram(token: str) -> bool:
    """True for 2-char CJK tokens whose both characters are noise characters"""
    if not token or len(token) != 2 or not looks_like_cjk(token):
        return False
    return token[0] in CJK_NOISE_CHARS and token[1] in CJK_NOISE_CHARS


def _is_stopword(token: str) -> bool:
    if _PURE_LATIN.match(token) and token in STOPWORDS_EN:
        return True
    if looks_like_cjk(token) and token in STOPWORDS_ZH:
        return True
    return False


def apply_policy(tokens: List[str], config: PolicyConfig = None) -> List[str]:
    """
    Filter raw tokens by lexical policy.

    Args:
        tokens: Output of tokenize_mixed()
        config: Policy options

    Returns:
        Filtered tokens, order and duplicates preserved
    """
    if not tokens:
        return []

    config = config or PolicyConfig()
    out = [t for t in tokens if t]

    if not config.keep_numbers:
        out = [t for t in out if not _PURE_DIGITS.match(t)]

    if config.enable_stopwords:
        out = [t for t in out if not _is_stopword(t)]

    if config.drop_cjk_noise_bigrams:
        out = [t for t in out if not is_cjk_noise_bigram(t)]

    return out
