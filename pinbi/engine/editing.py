"""
光标文本辅助函数

编辑器只需提供纯文本和光标偏移，这里负责找出光标前的拼音、
计算替换后的文本和新光标位置。不持有任何光标或选区状态。
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .tones import apply_tone

_TRAILING_SYLLABLE = re.compile(r'[a-zA-ZüÜvV]+$')
_ROMANIZED_RUN = re.compile(r'[a-züv]+\d?', re.IGNORECASE)


@dataclass(frozen=True)
class SyllableSpan:
    """光标前的拼音片段"""
    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)


def syllable_before_cursor(text_before_cursor: str) -> Optional[SyllableSpan]:
    """取光标前连续的拼音字母，遇到空格、标点、汉字即停止"""
    match = _TRAILING_SYLLABLE.search(text_before_cursor)
    if not match:
        return None
    return SyllableSpan(text=match.group(0), start=match.start())


def replace_span(text: str, start: int, end: int, replacement: str) -> Tuple[str, int]:
    """用 replacement 替换 [start, end)，返回 (新文本, 新光标位置)"""
    if not 0 <= start <= end <= len(text):
        raise ValueError(f"无效区间 [{start}, {end})，文本长度 {len(text)}")
    return text[:start] + replacement + text[end:], start + len(replacement)


def apply_tone_at_cursor(text: str, cursor: int, tone: int) -> Optional[Tuple[str, int]]:
    """给光标前的音节标调，光标前没有拼音时返回 None"""
    span = syllable_before_cursor(text[:cursor])
    if span is None:
        return None
    return replace_span(text, span.start, cursor, apply_tone(span.text, tone))


def apply_tone_to_selection(selected: str, tone: int) -> Optional[str]:
    """给选中的文本标调，选区中没有拼音字母时返回 None"""
    text = selected.strip()
    if not text or not _ROMANIZED_RUN.search(text):
        return None
    return apply_tone(text, tone)


def commit_candidate(text: str, cursor: int, word: str) -> Optional[Tuple[str, int]]:
    """用选中的候选词替换光标前的拼音"""
    span = syllable_before_cursor(text[:cursor])
    if span is None:
        return None
    return replace_span(text, span.start, cursor, word)
