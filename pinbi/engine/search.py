"""
词典全文搜索

对每个条目按评分规则表从上到下逐条匹配，命中的第一条规则决定分数。
结果按分数降序、词长升序排列。
"""

import re
from dataclasses import dataclass
from functools import cached_property
from typing import Callable, List, Optional, Tuple

from .normalize import normalize_general
from .store import DictionaryEntry, ReferenceDataStore
from .logging import get_engine_logger

logger = get_engine_logger()

_TOKEN_SPLIT = re.compile(r'[\s,.;:()!]+')


@dataclass(frozen=True)
class SearchQuery:
    """一次查询的三种形式"""
    raw: str          # 去掉首尾空白的原始查询（区分大小写）
    lowered: str
    normalized: str

    @classmethod
    def parse(cls, text: str) -> "SearchQuery":
        raw = text.strip()
        lowered = raw.lower()
        return cls(raw=raw, lowered=lowered, normalized=normalize_general(lowered))


class _EntryView:
    """条目的小写 / 规范化字段，按需计算"""

    def __init__(self, entry: DictionaryEntry):
        self.entry = entry

    @cached_property
    def meanings(self) -> str:
        return " ".join(self.entry.meanings).lower()

    @cached_property
    def norm_meanings(self) -> str:
        return normalize_general(self.meanings)

    @cached_property
    def romanization(self) -> str:
        return self.entry.romanization.lower()

    @cached_property
    def norm_romanization(self) -> str:
        return normalize_general(self.romanization)

    @cached_property
    def example(self) -> str:
        return (self.entry.example or "").lower()

    @cached_property
    def norm_example(self) -> str:
        return normalize_general(self.example)


def _word_equals(view: _EntryView, q: SearchQuery) -> bool:
    return view.entry.word == q.raw


def _word_contains(view: _EntryView, q: SearchQuery) -> bool:
    variant = view.entry.variant
    return q.raw in view.entry.word or (variant is not None and q.raw in variant)


def _meanings_equal(view: _EntryView, q: SearchQuery) -> bool:
    return view.meanings == q.lowered or view.norm_meanings == q.normalized


def _meanings_contain(view: _EntryView, q: SearchQuery) -> bool:
    return q.lowered in view.meanings or q.normalized in view.norm_meanings


def _meanings_have_token(view: _EntryView, q: SearchQuery) -> bool:
    if not _meanings_contain(view, q):
        return False
    return (q.lowered in _TOKEN_SPLIT.split(view.meanings)
            or q.normalized in _TOKEN_SPLIT.split(view.norm_meanings))


def _romanization_equals(view: _EntryView, q: SearchQuery) -> bool:
    return view.romanization == q.lowered or view.norm_romanization == q.normalized


def _romanization_contains(view: _EntryView, q: SearchQuery) -> bool:
    return q.lowered in view.romanization or q.normalized in view.norm_romanization


def _example_contains(view: _EntryView, q: SearchQuery) -> bool:
    return q.lowered in view.example or q.normalized in view.norm_example


@dataclass(frozen=True)
class ScoringRule:
    name: str
    score: int
    matches: Callable[[_EntryView, SearchQuery], bool]


# 优先级从高到低，第一条命中的规则生效
SCORING_RULES: Tuple[ScoringRule, ...] = (
    ScoringRule("word_exact", 1000, _word_equals),
    ScoringRule("word_substring", 950, _word_contains),
    ScoringRule("meaning_exact", 900, _meanings_equal),
    ScoringRule("meaning_token", 850, _meanings_have_token),
    ScoringRule("meaning_substring", 800, _meanings_contain),
    ScoringRule("romanization_exact", 750, _romanization_equals),
    ScoringRule("romanization_substring", 700, _romanization_contains),
    ScoringRule("example_substring", 600, _example_contains),
)

NO_MATCH = -1


def score_entry(entry: DictionaryEntry, query: SearchQuery) -> int:
    """按规则表给条目打分，未命中返回 NO_MATCH"""
    view = _EntryView(entry)
    for rule in SCORING_RULES:
        if rule.matches(view, query):
            return rule.score
    return NO_MATCH


class DictionarySearch:
    """词典全文搜索（汉字、释义、拼音、例句）"""

    def __init__(self, store: ReferenceDataStore):
        self.store = store

    def search(self, raw_query: str) -> List[DictionaryEntry]:
        data = self.store.load()

        # 完全等于某个词时直接返回
        exact = data.get(raw_query)
        if exact is not None:
            return [exact]

        query = SearchQuery.parse(raw_query)
        if not query.normalized:
            return []

        scored: List[Tuple[int, DictionaryEntry]] = []
        for entry in data.values():
            score = self._safe_score(entry, query)
            if score is not None and score > 0:
                scored.append((score, entry))

        scored.sort(key=lambda item: (-item[0], len(item[1].word)))
        return [entry for _, entry in scored]

    @staticmethod
    def _safe_score(entry: DictionaryEntry, query: SearchQuery) -> Optional[int]:
        try:
            return score_entry(entry, query)
        except (TypeError, AttributeError, ValueError) as e:
            logger.warning(f"跳过无法评分的条目 {entry.word!r}: {e}")
            return None
