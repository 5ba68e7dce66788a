from .config import EngineConfig, EngineOutput, CandidateResult, MatchType
from .errors import PinbiError, DataLoadError
from .core import PinyinEngine
from .store import DictionaryEntry, RawRecord, ReferenceDataStore
from .search import DictionarySearch, SCORING_RULES
from .candidates import SyllableCandidateSearch, is_shorthand_query
from .normalize import normalize_general, normalize_romanization
from .tones import TONE_TABLE, apply_tone, tone_forms
from .editing import (
    SyllableSpan,
    syllable_before_cursor,
    replace_span,
    apply_tone_at_cursor,
    apply_tone_to_selection,
    commit_candidate,
)
from .logging import setup_logging, enable_file_logging, get_api_logger, get_engine_logger


def create_engine(config: EngineConfig = None) -> PinyinEngine:
    """
    创建引擎

    Args:
        config: 引擎配置（可选，默认从环境变量读取，词典使用包内 data/hsk）

    Returns:
        PinyinEngine 实例
    """
    return PinyinEngine(config or EngineConfig.from_env())


__all__ = [
    # 引擎
    'PinyinEngine',
    'create_engine',
    'EngineConfig',
    'EngineOutput',
    'CandidateResult',
    'MatchType',
    # 异常
    'PinbiError',
    'DataLoadError',
    # 数据
    'DictionaryEntry',
    'RawRecord',
    'ReferenceDataStore',
    # 搜索
    'DictionarySearch',
    'SCORING_RULES',
    'SyllableCandidateSearch',
    'is_shorthand_query',
    # 文本
    'normalize_general',
    'normalize_romanization',
    'TONE_TABLE',
    'apply_tone',
    'tone_forms',
    # 光标辅助
    'SyllableSpan',
    'syllable_before_cursor',
    'replace_span',
    'apply_tone_at_cursor',
    'apply_tone_to_selection',
    'commit_candidate',
    # 日志
    'setup_logging',
    'enable_file_logging',
    'get_api_logger',
    'get_engine_logger',
]
