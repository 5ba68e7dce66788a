import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict

from .store import DictionaryEntry


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ('0', 'false', 'no', 'off', '')


@dataclass
class EngineConfig:
    """引擎配置"""
    data_dir: Optional[str] = None     # None 表示使用包内自带的 data/hsk
    levels: int = 6
    file_pattern: str = "hsk{level}.json"
    max_candidates: int = 10
    cache_size: int = 2000
    derive_variants: bool = True       # 用 OpenCC 推导繁体异体
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """从环境变量读取配置"""
        default = cls()
        return cls(
            data_dir=os.getenv("PINBI_DATA_DIR") or None,
            levels=int(os.getenv("PINBI_LEVELS", default.levels)),
            max_candidates=int(os.getenv("PINBI_MAX_CANDIDATES", default.max_candidates)),
            cache_size=int(os.getenv("PINBI_CACHE_SIZE", default.cache_size)),
            derive_variants=_env_bool("PINBI_DERIVE_VARIANTS", default.derive_variants),
            log_level=os.getenv("PINBI_LOG_LEVEL", default.log_level),
        )


class MatchType(str, Enum):
    """候选匹配层级"""
    EXACT = "exact"
    PARTIAL = "partial"
    SHORTHAND = "shorthand"


@dataclass
class CandidateResult:
    """拼音候选结果"""
    entry: DictionaryEntry
    match_type: MatchType
    syllable_count: int

    @property
    def is_shorthand(self) -> bool:
        return self.match_type is MatchType.SHORTHAND

    def to_dict(self) -> Dict:
        data = self.entry.to_dict()
        data.update(
            match_type=self.match_type.value,
            is_shorthand=self.is_shorthand,
            syllable_count=self.syllable_count,
        )
        return data


@dataclass
class EngineOutput:
    """引擎输出"""
    query: str = ""
    candidates: List[CandidateResult] = field(default_factory=list)
    is_shorthand: bool = False
    metadata: Dict = field(default_factory=dict)
