import threading
import time
from typing import Dict, List, Mapping

from .config import EngineConfig, EngineOutput, CandidateResult
from .cache import LRUCache
from .store import DictionaryEntry, ReferenceDataStore
from .search import DictionarySearch
from .candidates import SyllableCandidateSearch, is_shorthand_query
from .normalize import normalize_romanization
from .tones import apply_tone
from .logging import get_engine_logger

logger = get_engine_logger()


class PinyinEngine:
    """
    拼音编辑引擎

    - 标调：直接计算，无需词典
    - 词典搜索 / 候选搜索：共用同一个参考数据缓存，结果按查询缓存
    """

    def __init__(self, config: EngineConfig = None, store: ReferenceDataStore = None):
        self.config = config or EngineConfig()
        self.store = store or ReferenceDataStore.from_config(self.config)

        self.cache = LRUCache(self.config.cache_size)
        self.dictionary = DictionarySearch(self.store)
        self.candidates = SyllableCandidateSearch(self.store, limit=self.config.max_candidates)

        self.stats = {'total': 0, 'cache_hits': 0, 'total_ms': 0.0}
        self._stats_lock = threading.Lock()

    def warm_up(self) -> Mapping[str, DictionaryEntry]:
        """预加载参考数据，失败时抛 DataLoadError"""
        data = self.store.load()
        logger.info(f"词典就绪: {len(data)} 词 ({self.store.data_dir})")
        return data

    def apply_tone(self, text: str, tone: int) -> str:
        return apply_tone(text, tone)

    def is_shorthand_query(self, query: str) -> bool:
        return is_shorthand_query(normalize_romanization(query))

    def search_dictionary(self, query: str) -> List[DictionaryEntry]:
        """词典全文搜索"""
        return self._cached(('dictionary', query), self.dictionary.search, query)

    def search_candidates(self, query: str) -> List[CandidateResult]:
        """拼音候选搜索（最多 max_candidates 个）"""
        key = ('candidates', normalize_romanization(query))
        return self._cached(key, self.candidates.search, query)

    def suggest(self, query: str) -> EngineOutput:
        """候选搜索，附带简拼标记和耗时信息"""
        start = time.perf_counter()
        candidates = self.search_candidates(query)
        elapsed = (time.perf_counter() - start) * 1000
        return EngineOutput(
            query=query,
            candidates=candidates,
            is_shorthand=self.is_shorthand_query(query),
            metadata={
                'elapsed_ms': round(elapsed, 2),
                'cache_rate': round(self.cache.hit_rate, 3),
            },
        )

    def _cached(self, key, compute, query: str) -> List:
        start = time.perf_counter()

        cached = self.cache.get(key)
        if cached is not None:
            results = list(cached)
        else:
            results = compute(query)
            self.cache.put(key, tuple(results))

        elapsed = (time.perf_counter() - start) * 1000
        # API 的同步路由跑在线程池里，计数需加锁
        with self._stats_lock:
            self.stats['total'] += 1
            if cached is not None:
                self.stats['cache_hits'] += 1
            self.stats['total_ms'] += elapsed
        logger.debug(f"{key[0]} 查询 '{query}': {len(results)} 个结果, {elapsed:.2f}ms")
        return results

    def get_stats(self) -> Dict:
        """获取统计"""
        with self._stats_lock:
            snapshot = dict(self.stats)
        total = snapshot['total'] or 1
        return {
            'total_requests': snapshot['total'],
            'cache_hit_rate': snapshot['cache_hits'] / total,
            'avg_latency_ms': snapshot['total_ms'] / total,
            'dictionary_loaded': self.store.is_loaded,
        }
