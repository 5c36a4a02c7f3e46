"""
Mixed-script core tokenizer (Latin + CJK in a single pass).

The scanner walks the chunk left to right and classifies every character:
- Latin/digit ([A-Za-z0-9]) -> buffered into a Latin run
- CJK (Han ideographs, kana, Hangul syllables) -> buffered into a CJK run
- anything else -> boundary, flushes both buffers

Latin runs are split on non-alphanumerics and (optionally) on camelCase /
digit transitions; the whole run can be emitted as well ("joined" form):

    "VideoEditEngine2026" -> video, edit, engine, 2026, videoeditengine2026

CJK runs have no word boundaries, so they are emitted as a span, as single
characters, or as single characters + overlapping bigrams:

    "图书馆" (bigram) -> 图, 书, 馆, 图书, 书馆

When split Latin parts are not wanted as standalone terms (indexing default),
short decomposition fragments are dropped afterwards; the joined form still
carries recall for them.
"""

import re
from dataclasses import dataclass
from typing import List

CJK_MODES = ("span", "char", "bigram")

# Short Latin terms that are meaningful on their own
SHORT_TOKEN_ALLOWLIST = frozenset(["ai", "ml", "cs", "ui", "ux"])

_CJK_CHAR = re.compile(
    r"[\u3400-\u4dbf\u4e00-\u9fff\u3040-\u309f\u30a0-\u30ff\uac00-\ud7af]"
)
_LATIN_OR_DIGIT = re.compile(r"[A-Za-z0-9]")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")
_CAMEL_PARTS = re.compile(r"[A-Z]?[a-z]+|[A-Z]+(?![a-z])|\d+")
_PURE_LATIN = re.compile(r"^[a-z]+$")
_PURE_DIGITS = re.compile(r"^\d+$")


@dataclass(frozen=True)
class CoreTokenizerConfig:
    """Options for tokenize_mixed()"""
    cjk_mode: str = "bigram"          # "span" | "char" | "bigram"
    keep_cjk_singles: bool = True     # bigram mode: also emit single characters
    lower_case_latin: bool = True
    split_camel: bool = True
    min_token_length: int = 1
    emit_joined_latin: bool = True    # Emit the whole Latin run next to its parts
    emit_split_latin: bool = False    # Keep short decomposition fragments


def is_cjk_char(ch: str) -> bool:
    return bool(_CJK_CHAR.match(ch))


def is_latin_or_digit(ch: str) -> bool:
    return bool(_LATIN_OR_DIGIT.match(ch))


def split_camel_case(token: str) -> List[str]:
    """
    Split a Latin token on case and digit transitions.

    Examples:
        >>> split_camel_case("VideoEditEngine2026")
        ['Video', 'Edit', 'Engine', '2026']
        >>> split_camel_case("HTTPServer")
        ['HTTP', 'Server']
    """
    parts = _CAMEL_PARTS.findall(token)
    return parts if parts else [token]


def _drop_split_fragments(tokens: List[str]) -> List[str]:
    kept = []
    for token in tokens:
        if _PURE_LATIN.match(token):
            if len(token) <= 1:
                continue
            if len(token) <= 3 and token not in SHORT_TOKEN_ALLOWLIST:
                continue
        if _PURE_DIGITS.match(token) and len(token) <= 2:
            continue
        kept.append(token)
    return kept


def tokenize_mixed(text: str, config: CoreTokenizerConfig = None) -> List[str]:
    """
    Tokenize one chunk of mixed Latin/CJK text.

    Args:
        text: Chunk text (usually one output item of chunk_text())
        config: Core tokenizer options

    Returns:
        Raw tokens in scan order (duplicates kept, they carry term frequency)
    """
    if text is None:
        return []
    if not isinstance(text, str):
        text = str(text)
    if not text:
        return []

    config = config or CoreTokenizerConfig()
    min_len = config.min_token_length
    tokens: List[str] = []

    def split_latin(run: str) -> List[str]:
        parts = []
        for part in _NON_ALNUM.split(run):
            if not part:
                continue
            pieces = split_camel_case(part) if config.split_camel else [part]
            for piece in pieces:
                if config.lower_case_latin:
                    piece = piece.lower()
                if piece and len(piece) >= min_len:
                    parts.append(piece)
        return parts

    def flush_latin(run: str):
        if not run:
            return
        parts = split_latin(run)
        tokens.extend(parts)
        if config.emit_joined_latin:
            joined = run.lower() if config.lower_case_latin else run
            # A run that did not decompose is already emitted once
            if parts == [joined]:
                return
            if len(joined) >= min_len:
                tokens.append(joined)

    def flush_cjk(run: str):
        if not run:
            return

        if config.cjk_mode == "span":
            if len(run) >= min_len:
                tokens.append(run)
            return

        if config.cjk_mode == "char":
            for ch in run:
                if len(ch) >= min_len:
                    tokens.append(ch)
            return

        # bigram (also the fallback for unknown modes)
        if config.keep_cjk_singles or len(run) == 1:
            for ch in run:
                if len(ch) >= min_len:
                    tokens.append(ch)
        if len(run) == 1:
            return
        for i in range(len(run) - 1):
            bigram = run[i:i + 2]
            if len(bigram) >= min_len:
                tokens.append(bigram)

    latin_buf = []
    cjk_buf = []

    for ch in text:
        if is_latin_or_digit(ch):
            if cjk_buf:
                flush_cjk("".join(cjk_buf))
                cjk_buf = []
            latin_buf.append(ch)
        elif is_cjk_char(ch):
            if latin_buf:
                flush_latin("".join(latin_buf))
                latin_buf = []
            cjk_buf.append(ch)
        else:
            # boundary
            flush_latin("".join(latin_buf))
            flush_cjk("".join(cjk_buf))
            latin_buf = []
            cjk_buf = []

    flush_latin("".join(latin_buf))
    flush_cjk("".join(cjk_buf))

    if not config.emit_split_latin:
        tokens = _drop_split_fragments(tokens)

    return tokens
