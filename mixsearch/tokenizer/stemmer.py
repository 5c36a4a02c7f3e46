"""
Snowball Stemmer for English (via NLTK).

Used by the post-processor when stem_latin is enabled. Only pure Latin
tokens are stemmed; CJK tokens, numerals and joined alphanumeric compounds
("csc207") pass through unchanged.

Examples:
- "architectures" → "architectur"
- "strategies" → "strategi"
- "running" → "run"
"""

import re

from nltk.stem.snowball import SnowballStemmer

# Initialize stemmer once (thread-safe, reusable)
_stemmer = SnowballStemmer('english')

_PURE_LATIN = re.compile(r"^[a-z]+$")


def stem(word: str) -> str:
    """
    Stem a single word using Snowball algorithm.

    Args:
        word: Lowercase word to stem

    Returns:
        Stemmed word (unchanged for non-Latin tokens)

    Examples:
        >>> stem("searching")
        'search'
        >>> stem("图书馆")
        '图书馆'
    """
    if not word or not _PURE_LATIN.match(word):
        return word
    return _stemmer.stem(word)
