"""
Unit tests for the mixed-script core tokenizer.
"""

import pytest

from mixsearch.tokenizer.core import (
    CoreTokenizerConfig,
    is_cjk_char,
    split_camel_case,
    tokenize_mixed,
)

pytestmark = pytest.mark.unit


class TestSplitCamelCase:
    """Test camelCase and digit splitting"""

    def test_camel_and_digits(self):
        """Test camelCase and digit boundaries"""
        assert split_camel_case("VideoEditEngine2026") == ["Video", "Edit", "Engine", "2026"]

    def test_acronym_prefix(self):
        """Test an acronym prefix stays together"""
        assert split_camel_case("HTTPServer") == ["HTTP", "Server"]

    def test_lowercase_word(self):
        """Test a lowercase word is one part"""
        assert split_camel_case("kubernetes") == ["kubernetes"]


class TestCharacterClasses:
    """Test script classification of characters"""

    def test_cjk_ranges(self):
        """Test CJK ranges are detected"""
        assert is_cjk_char("图")
        assert is_cjk_char("カ")   # katakana
        assert is_cjk_char("한")   # hangul
        assert not is_cjk_char("a")
        assert not is_cjk_char("。")


class TestTokenizeMixed:
    """Test Latin runs, CJK runs and their boundaries"""

    def test_camel_case_with_joined_form(self):
        """Test camelCase parts plus the joined form"""
        tokens = tokenize_mixed("VideoEditEngine2026")
        assert tokens == ["video", "edit", "engine", "2026", "videoeditengine2026"]

    def test_joined_form_disabled(self):
        """Test the joined form can be turned off"""
        config = CoreTokenizerConfig(emit_joined_latin=False)
        assert tokenize_mixed("VideoEditEngine2026", config) == ["video", "edit", "engine", "2026"]

    def test_plain_word_not_duplicated(self):
        """Test a plain word is emitted once"""
        assert tokenize_mixed("kubernetes") == ["kubernetes"]

    def test_short_fragments_dropped_by_default(self):
        """'csc' is a decomposition fragment; the joined form keeps recall"""
        assert tokenize_mixed("CSC207") == ["207", "csc207"]

    def test_short_fragments_kept_when_requested(self):
        """Test short fragments are kept when allowed"""
        config = CoreTokenizerConfig(emit_split_latin=True)
        assert tokenize_mixed("CSC207", config) == ["csc", "207", "csc207"]

    def test_short_allowlist_survives(self):
        """Test allowlisted short tokens survive"""
        assert "ai" in tokenize_mixed("AI")
        assert "ml" in tokenize_mixed("ML")

    def test_cjk_bigram_mode(self):
        """Test bigram mode emits singles and bigrams"""
        assert tokenize_mixed("图书馆") == ["图", "书", "馆", "图书", "书馆"]

    def test_cjk_bigram_without_singles(self):
        """Test bigram mode without single characters"""
        config = CoreTokenizerConfig(keep_cjk_singles=False)
        assert tokenize_mixed("图书馆", config) == ["图书", "书馆"]

    def test_single_cjk_char_always_emitted(self):
        """Test a lone CJK character is emitted"""
        config = CoreTokenizerConfig(keep_cjk_singles=False)
        assert tokenize_mixed("书", config) == ["书"]

    def test_cjk_char_mode(self):
        """Test char mode emits one token per character"""
        config = CoreTokenizerConfig(cjk_mode="char")
        assert tokenize_mixed("图书馆", config) == ["图", "书", "馆"]

    def test_cjk_span_mode(self):
        """Test span mode emits the whole run"""
        config = CoreTokenizerConfig(cjk_mode="span")
        assert tokenize_mixed("图书馆", config) == ["图书馆"]

    def test_unknown_cjk_mode_falls_back_to_bigram(self):
        """Test an unknown CJK mode behaves like bigram"""
        config = CoreTokenizerConfig(cjk_mode="trigram")
        assert tokenize_mixed("图书", config) == ["图", "书", "图书"]

    def test_script_transition_is_a_boundary(self):
        """Test a change of script starts a new token"""
        tokens = tokenize_mixed("Python编程")
        assert tokens == ["python", "编", "程", "编程"]

    def test_punctuation_is_a_boundary(self):
        """Test punctuation separates tokens"""
        tokens = tokenize_mixed("图书,馆")
        assert "书馆" not in tokens
        assert "图书" in tokens

    def test_duplicates_kept(self):
        """Test repeated tokens are all emitted"""
        tokens = tokenize_mixed("pipeline pipeline")
        assert tokens.count("pipeline") == 2

    def test_min_token_length(self):
        """Test tokens below the minimum length are dropped"""
        config = CoreTokenizerConfig(min_token_length=2)
        tokens = tokenize_mixed("图书馆", config)
        assert tokens == ["图书", "书馆"]

    def test_no_lowercase(self):
        """Test case is kept when lowercasing is off"""
        config = CoreTokenizerConfig(lower_case_latin=False, emit_split_latin=True)
        assert tokenize_mixed("VideoEdit", config) == ["Video", "Edit", "VideoEdit"]

    def test_empty_and_none(self):
        """Test empty and None input"""
        assert tokenize_mixed("") == []
        assert tokenize_mixed(None) == []

    def test_non_string_input(self):
        """Test non-string input is coerced"""
        assert tokenize_mixed(2026) == ["2026"]
