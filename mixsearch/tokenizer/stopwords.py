"""
Stopword lists and CJK noise characters.

Two sets of lists live here:
- STOPWORDS_EN / STOPWORDS_ZH: used by the lexical policy filter
- DEFAULT_*_POST_STOPWORDS: defaults of the post-processor's own stopword pass

CJK_NOISE_CHARS are function characters. A 2-character CJK token is only
treated as noise when BOTH characters are in this set: "的是" is dropped,
"好的" and "图书" survive because one side carries meaning.
"""

# English stopwords (policy filter)
STOPWORDS_EN = frozenset([
    "the", "a", "an", "and", "or", "to", "of", "in", "on", "for", "with",
    "is", "are", "was", "were", "be", "been", "it", "this", "that",
])

# Chinese stopwords (policy filter)
STOPWORDS_ZH = frozenset([
    "的", "是", "了", "在", "有", "和", "与", "及", "也", "都", "就",
    "这", "那", "一个", "我们", "你们", "他们",
    "我", "你", "他", "她", "它", "们",
])

# Characters that only form noise bigrams with each other
CJK_NOISE_CHARS = frozenset([
    "的", "是", "了",
    "我", "你", "他", "她", "它", "们",
    "很", "也", "都", "就", "还", "又",
    "对", "把", "被", "给", "跟", "向",
    "来", "去", "说", "讲",
    "真", "确", "其", "而",
    "这", "那",
])

# Post-processor defaults
DEFAULT_EN_POST_STOPWORDS = frozenset([
    "the", "a", "an", "and", "or", "to", "of", "in", "on", "for", "with", "is", "are", "was", "were",
    "be", "been", "being", "as", "at", "by", "from", "that", "this", "it", "its", "but", "not",
])

DEFAULT_ZH_POST_STOPWORDS = frozenset([
    "的", "是", "了", "在", "和", "与", "及", "也", "就", "都", "而", "但",
    "这", "那", "一个", "一些", "这种", "那种",
])
