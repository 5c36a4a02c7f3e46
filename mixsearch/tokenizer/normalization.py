"""
Text normalization - first stage of the tokenization pipeline.

Steps (each one optional via NormalizationConfig):
1. Unicode canonicalization (NFKC by default: full-width -> half-width, ligatures split)
2. Line endings: CRLF / CR -> LF (newlines become spaces unless kept)
3. Control character stripping (whitespace controls survive)
4. Lowercasing
5. Whitespace collapsing
6. Trim

The function is total: None and empty input return "", and an unsupported
unicode form is logged and skipped instead of failing the whole pipeline.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Whitespace controls (\t \n \v \f) are left to the whitespace step
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0e-\x1f\x7f]")
_HORIZONTAL_WHITESPACE = re.compile(r"[ \t\f\v]+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_ANY_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class NormalizationConfig:
    """Options for normalize_text()"""
    unicode_form: str = "NFKC"      # "NFC" | "NFD" | "NFKC" | "NFKD"
    lower_case: bool = True
    keep_newlines: bool = False     # Keep "\n" (chunker can split on it)
    remove_control_chars: bool = True
    collapse_whitespace: bool = True
    trim: bool = True


def normalize_text(text, config: NormalizationConfig = None) -> str:
    """
    Canonicalize raw text before chunking.

    Args:
        text: Raw text (None is treated as empty)
        config: Normalization options (defaults: NFKC, lowercase, single-line)

    Returns:
        Normalized text

    Examples:
        >>> normalize_text("  Ｈｅｌｌｏ\\r\\nWORLD  ")
        'hello world'

        >>> normalize_text("a\\r\\n\\r\\n\\r\\n\\r\\nb", NormalizationConfig(keep_newlines=True))
        'a\\n\\nb'
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    if not text:
        return ""

    config = config or NormalizationConfig()

    # 1) Unicode normalization - unknown form is skipped, text stays as-is
    if config.unicode_form:
        try:
            text = unicodedata.normalize(config.unicode_form, text)
        except (ValueError, TypeError) as e:
            logger.debug(f"Skipping unicode normalization ({config.unicode_form!r}): {e}")

    # 2) Line endings
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if not config.keep_newlines:
        text = text.replace("\n", " ")

    # 3) Control characters
    if config.remove_control_chars:
        text = _CONTROL_CHARS.sub("", text)

    # 4) Case folding
    if config.lower_case:
        text = text.lower()

    # 5) Whitespace
    if config.collapse_whitespace:
        if config.keep_newlines:
            text = _HORIZONTAL_WHITESPACE.sub(" ", text)
            text = _EXCESS_NEWLINES.sub("\n\n", text)
        else:
            text = _ANY_WHITESPACE.sub(" ", text)

    if config.trim:
        text = text.strip()

    return text
