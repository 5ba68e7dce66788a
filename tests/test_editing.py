"""
光标文本辅助函数测试
"""

import pytest

from pinbi.engine import (
    SyllableSpan,
    syllable_before_cursor,
    replace_span,
    apply_tone_at_cursor,
    apply_tone_to_selection,
    commit_candidate,
)


class TestSyllableBeforeCursor:

    def test_trailing_letters(self):
        assert syllable_before_cursor("我说 nihao") == SyllableSpan(text="nihao", start=3)

    def test_stops_at_hanzi(self):
        span = syllable_before_cursor("你好ma")
        assert span.text == "ma"
        assert span.start == 2
        assert span.end == 4

    def test_umlaut(self):
        assert syllable_before_cursor("lü").text == "lü"

    @pytest.mark.parametrize("text", ["", "你好", "hao ", "hao3"])
    def test_nothing_before_cursor(self, text):
        assert syllable_before_cursor(text) is None


class TestReplaceSpan:

    def test_replace(self):
        assert replace_span("abc def", 4, 7, "你好") == ("abc 你好", 6)

    def test_insert(self):
        assert replace_span("ab", 1, 1, "x") == ("axb", 2)

    def test_invalid_range(self):
        with pytest.raises(ValueError):
            replace_span("ab", 2, 1, "x")


class TestToneAtCursor:

    def test_converts_syllable(self):
        assert apply_tone_at_cursor("ni hao", 6, 3) == ("ni hǎo", 6)

    def test_keeps_text_after_cursor(self):
        assert apply_tone_at_cursor("ni hao!", 2, 3) == ("nǐ hao!", 2)

    def test_no_syllable(self):
        assert apply_tone_at_cursor("你好", 2, 3) is None

    def test_no_vowel_keeps_text(self):
        assert apply_tone_at_cursor("m", 1, 2) == ("m", 1)


class TestToneSelection:

    def test_selection(self):
        assert apply_tone_to_selection("  dou ", 4) == "dòu"

    def test_tone_digit_suffix(self):
        assert apply_tone_to_selection("hao3", 3) == "hǎo"

    @pytest.mark.parametrize("text", ["", "   ", "你好", "123"])
    def test_not_romanized(self, text):
        assert apply_tone_to_selection(text, 1) is None


class TestCommitCandidate:

    def test_replaces_syllable(self):
        assert commit_candidate("我说nihao", 7, "你好") == ("我说你好", 4)

    def test_text_after_cursor_kept(self):
        assert commit_candidate("ni。", 2, "你") == ("你。", 1)

    def test_nothing_to_replace(self):
        assert commit_candidate("你好", 2, "吗") is None
