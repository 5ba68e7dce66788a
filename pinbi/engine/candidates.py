"""
拼音 → 汉字候选搜索

三个层级依次判定（每个条目只进一个层级）：
- exact: 整体拼音或其中某个音节与输入相同
- partial: 整体拼音或某个音节以输入开头
- shorthand: 输入为 2 个以上字母时，按音节首字母匹配（如 nh → ni hao）
各层级内按音节数升序，最后按 exact → partial → shorthand 拼接并截断。
"""

import re
from typing import List, Optional

from .config import CandidateResult, MatchType
from .normalize import normalize_romanization
from .store import DictionaryEntry, ReferenceDataStore
from .logging import get_engine_logger

logger = get_engine_logger()

_LETTERS_ONLY = re.compile(r'[a-z]+')

DEFAULT_LIMIT = 10


def is_shorthand_query(normalized_query: str) -> bool:
    """至少 2 个字母且全是字母时视为首字母简拼"""
    return len(normalized_query) >= 2 and _LETTERS_ONLY.fullmatch(normalized_query) is not None


def matches_shorthand(syllables: List[str], shorthand: str) -> bool:
    initials = ''.join(s[0] for s in syllables)
    return initials.startswith(shorthand)


def classify(entry: DictionaryEntry, query: str, shorthand: bool) -> Optional[CandidateResult]:
    """判定条目的匹配层级，query 须已规范化；不匹配时返回 None"""
    romanization = normalize_romanization(entry.romanization)
    syllables = romanization.split()
    count = len(syllables)

    if romanization == query or query in syllables:
        return CandidateResult(entry, MatchType.EXACT, count)

    if romanization.startswith(query) or any(s.startswith(query) for s in syllables):
        return CandidateResult(entry, MatchType.PARTIAL, count)

    if shorthand and matches_shorthand(syllables, query):
        return CandidateResult(entry, MatchType.SHORTHAND, count)

    return None


class SyllableCandidateSearch:
    """拼音候选搜索"""

    def __init__(self, store: ReferenceDataStore, limit: int = DEFAULT_LIMIT):
        self.store = store
        self.limit = limit

    def search(self, raw_query: str) -> List[CandidateResult]:
        query = normalize_romanization(raw_query)
        if not query:
            return []

        shorthand = is_shorthand_query(query)
        buckets = {match_type: [] for match_type in MatchType}

        for entry in self.store.load().values():
            try:
                result = classify(entry, query, shorthand)
            except (TypeError, AttributeError, ValueError) as e:
                logger.warning(f"跳过无法匹配的条目 {entry.word!r}: {e}")
                continue
            if result is not None:
                buckets[result.match_type].append(result)

        ranked: List[CandidateResult] = []
        for match_type in (MatchType.EXACT, MatchType.PARTIAL, MatchType.SHORTHAND):
            ranked.extend(sorted(buckets[match_type], key=lambda r: r.syllable_count))

        return ranked[:self.limit]
