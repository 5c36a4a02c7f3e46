"""
Pre-tokenization: split normalized text into small chunks.

Chunks are bounded by sentences and structural separators so that the core
tokenizer never joins Latin runs across "path/to/file" or "a,b" boundaries.

Pipeline:
1. Protect URLs / e-mails behind placeholders (optional)
2. Split on newlines (keep_newlines) or fold them into spaces
3. Split sentences after terminal punctuation
4. Split on separators: / \\ | , _ : ; ( ) [ ] { } < > and dash runs
5. Restore placeholders, trim, drop chunks shorter than min_chunk_length
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

_PROTECT_PATTERNS = (
    re.compile(r"https?://[^\s]+", re.IGNORECASE),
    re.compile(r"[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}", re.IGNORECASE),
)

# Private-use code points: never separators, never sentence punctuation
_PLACEHOLDER_OPEN = "\ue000"
_PLACEHOLDER_CLOSE = "\ue001"

# Latin terminators and ellipsis end a sentence only before whitespace / end of text
_LATIN_SENTENCE_END = re.compile(r"([.!?]+|…+)(?:\s+|\Z)")
# Full-width terminators always end a sentence (CJK text has no spaces)
_CJK_SENTENCE_END = re.compile(r"([。！？]+)")

_SEPARATORS = re.compile(r"[/\\|,_:;()\[\]{}<>]+")
_DASH_RUNS = re.compile(r"[-_]+")
_WHITESPACE = re.compile(r"\s+")
_NEWLINES = re.compile(r"\n+")


@dataclass(frozen=True)
class ChunkingConfig:
    """Options for chunk_text()"""
    keep_newlines: bool = False
    split_sentences: bool = True
    min_chunk_length: int = 1
    split_on_separators: bool = True
    protect_patterns: bool = False   # Keep URLs / e-mails in one chunk


def _protect(text: str) -> Tuple[str, List[Tuple[str, str]]]:
    placeholders = []

    def _replace(match):
        key = f"{_PLACEHOLDER_OPEN}{len(placeholders)}{_PLACEHOLDER_CLOSE}"
        placeholders.append((key, match.group(0)))
        return key

    for pattern in _PROTECT_PATTERNS:
        text = pattern.sub(_replace, text)
    return text, placeholders


def _restore(chunk: str, placeholders: List[Tuple[str, str]]) -> str:
    if _PLACEHOLDER_OPEN not in chunk:
        return chunk
    for key, value in placeholders:
        if key in chunk:
            chunk = chunk.replace(key, value)
    return chunk


def _split_sentences(chunk: str) -> List[str]:
    chunk = _LATIN_SENTENCE_END.sub(lambda m: m.group(1) + "\n", chunk)
    chunk = _CJK_SENTENCE_END.sub(lambda m: m.group(1) + "\n", chunk)
    return chunk.split("\n")


def chunk_text(text: str, config: ChunkingConfig = None) -> List[str]:
    """
    Split normalized text into ordered chunks.

    Args:
        text: Output of normalize_text()
        config: Chunking options

    Returns:
        Chunks in original order (empty list for empty input)

    Examples:
        >>> chunk_text("hello world. path/to/file")
        ['hello', 'world.', 'path', 'to', 'file']

        >>> chunk_text("see https://a.io/x_y now", ChunkingConfig(protect_patterns=True))
        ['see', 'https://a.io/x_y', 'now']
    """
    if text is None:
        return []
    if not isinstance(text, str):
        text = str(text)
    if not text:
        return []

    config = config or ChunkingConfig()

    placeholders = []
    if config.protect_patterns:
        text, placeholders = _protect(text)

    if config.keep_newlines:
        chunks = text.split("\n")
    else:
        chunks = [_NEWLINES.sub(" ", text)]

    if config.split_sentences:
        sentences = []
        for chunk in chunks:
            sentences.extend(_split_sentences(chunk))
        chunks = sentences

    if config.split_on_separators:
        parts = []
        for chunk in chunks:
            chunk = _SEPARATORS.sub(" ", chunk)
            chunk = _DASH_RUNS.sub(" ", chunk)
            parts.extend(_WHITESPACE.split(chunk))
        chunks = parts

    if placeholders:
        chunks = [_restore(chunk, placeholders) for chunk in chunks]

    cleaned = []
    for chunk in chunks:
        chunk = chunk.strip()
        if chunk and len(chunk) >= config.min_chunk_length:
            cleaned.append(chunk)
    return cleaned
