"""
pinbi - 拼音编辑辅助引擎

声调标注、拼音转汉字候选、HSK 词典搜索
"""

__version__ = "0.1.0"

from pinbi.engine import (
    PinyinEngine,
    create_engine,
    EngineConfig,
    EngineOutput,
    CandidateResult,
    MatchType,
    DataLoadError,
    DictionaryEntry,
    ReferenceDataStore,
    DictionarySearch,
    SyllableCandidateSearch,
    apply_tone,
    tone_forms,
    normalize_general,
    normalize_romanization,
)

__all__ = [
    "__version__",
    # 引擎
    "PinyinEngine",
    "create_engine",
    "EngineConfig",
    "EngineOutput",
    "CandidateResult",
    "MatchType",
    "DataLoadError",
    # 词典
    "DictionaryEntry",
    "ReferenceDataStore",
    "DictionarySearch",
    "SyllableCandidateSearch",
    # 文本
    "apply_tone",
    "tone_forms",
    "normalize_general",
    "normalize_romanization",
]
