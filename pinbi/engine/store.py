"""
参考数据模块

按级别顺序读取 hsk1..hskN 数据文件，合并为以汉字词为键的只读词典。
同一个词在高级别文件中再次出现时覆盖低级别的记录。
"""

import threading
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import orjson
from opencc import OpenCC

from .errors import DataLoadError
from .logging import get_engine_logger, log_execution_time

logger = get_engine_logger()

DEFAULT_DATA_DIR = Path(__file__).parent.parent / 'data' / 'hsk'


@dataclass(frozen=True)
class RawExample:
    """原始例句"""
    hanzi: str
    pinyin: str
    meaning: str

    def format(self) -> str:
        return f"{self.hanzi} ({self.pinyin}) - {self.meaning}"


@dataclass(frozen=True)
class RawRecord:
    """数据文件中的一条原始记录"""
    hanzi: str
    pinyin: str
    meaning: str = ""
    id: str = ""
    index: int = 0
    example: Optional[RawExample] = None
    traditional: Optional[str] = None

    @classmethod
    def parse(cls, data) -> "RawRecord":
        """校验并解析原始记录，格式不对时抛 ValueError"""
        if not isinstance(data, dict):
            raise ValueError("记录不是对象")

        word = data.get('word')
        if not isinstance(word, dict):
            raise ValueError("缺少 word 字段")
        hanzi = word.get('hanzi')
        pinyin = word.get('pinyin')
        if not isinstance(hanzi, str) or not hanzi:
            raise ValueError("缺少 word.hanzi")
        if not isinstance(pinyin, str):
            raise ValueError(f"缺少 word.pinyin ({hanzi})")

        example = None
        raw_example = data.get('example')
        if raw_example:
            if not isinstance(raw_example, dict):
                raise ValueError(f"example 不是对象 ({hanzi})")
            example = RawExample(
                hanzi=str(raw_example.get('hanzi') or ''),
                pinyin=str(raw_example.get('pinyin') or ''),
                meaning=str(raw_example.get('meaning') or ''),
            )

        traditional = data.get('traditional')
        return cls(
            hanzi=hanzi,
            pinyin=pinyin,
            meaning=str(data.get('meaning') or ''),
            id=str(data.get('id') or ''),
            index=data.get('index') or 0,
            example=example,
            traditional=traditional if isinstance(traditional, str) and traditional else None,
        )


@dataclass(frozen=True)
class DictionaryEntry:
    """合并后的词典条目"""
    word: str
    romanization: str
    meanings: Tuple[str, ...] = field(default_factory=tuple)
    example: Optional[str] = None
    variant: Optional[str] = None

    @classmethod
    def from_record(cls, record: RawRecord, variant: Optional[str] = None) -> "DictionaryEntry":
        return cls(
            word=record.hanzi,
            romanization=record.pinyin,
            meanings=(record.meaning,) if record.meaning else (),
            example=record.example.format() if record.example else None,
            variant=variant,
        )

    def to_dict(self) -> Dict:
        return {
            'word': self.word,
            'romanization': self.romanization,
            'meanings': list(self.meanings),
            'example': self.example,
            'variant': self.variant,
        }


class ReferenceDataStore:
    """
    参考数据缓存

    首次 load() 时读取全部级别文件并构建词典，之后一直复用。
    并发首次调用只会构建一次；构建失败不保留任何缓存，下次调用重新加载。
    """

    def __init__(
        self,
        data_dir: Optional[str] = None,
        levels: int = 6,
        file_pattern: str = "hsk{level}.json",
        derive_variants: bool = True,
    ):
        self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self.levels = levels
        self.file_pattern = file_pattern
        self.derive_variants = derive_variants

        self._entries: Optional[Mapping[str, DictionaryEntry]] = None
        self._lock = threading.Lock()
        self.load_count = 0

    @classmethod
    def from_config(cls, config) -> "ReferenceDataStore":
        return cls(
            data_dir=config.data_dir,
            levels=config.levels,
            file_pattern=config.file_pattern,
            derive_variants=config.derive_variants,
        )

    @property
    def is_loaded(self) -> bool:
        return self._entries is not None

    def level_paths(self) -> List[Path]:
        return [
            self.data_dir / self.file_pattern.format(level=level)
            for level in range(1, self.levels + 1)
        ]

    def load(self) -> Mapping[str, DictionaryEntry]:
        """返回合并后的词典（只读），首次调用时加载"""
        entries = self._entries
        if entries is not None:
            return entries

        with self._lock:
            if self._entries is None:
                self._entries = self._build()
            return self._entries

    @log_execution_time()
    def _build(self) -> Mapping[str, DictionaryEntry]:
        converter = OpenCC('s2t') if self.derive_variants else None
        dictionary: Dict[str, DictionaryEntry] = {}

        for path in self.level_paths():
            records = self._read_level(path)
            for record in records:
                dictionary[record.hanzi] = DictionaryEntry.from_record(
                    record, self._variant_of(record, converter)
                )
            logger.debug(f"已读取 {path.name}: {len(records)} 条")

        self.load_count += 1
        logger.info(f"参考数据加载完成: {len(dictionary)} 词, {self.levels} 个级别")
        return MappingProxyType(dictionary)

    def _read_level(self, path: Path) -> List[RawRecord]:
        try:
            content = path.read_bytes()
        except OSError as e:
            logger.error(f"无法读取数据文件 {path}: {e}")
            raise DataLoadError("数据文件不存在或无法读取", str(path)) from e

        try:
            data = orjson.loads(content)
        except orjson.JSONDecodeError as e:
            raise DataLoadError(f"JSON 解析失败 ({e})", str(path)) from e

        if not isinstance(data, list):
            raise DataLoadError("顶层不是数组", str(path))

        records = []
        for position, item in enumerate(data):
            try:
                records.append(RawRecord.parse(item))
            except ValueError as e:
                raise DataLoadError(f"第 {position} 条记录无效: {e}", str(path)) from e
        return records

    @staticmethod
    def _variant_of(record: RawRecord, converter: Optional[OpenCC]) -> Optional[str]:
        if record.traditional:
            variant = record.traditional
        elif converter is not None:
            variant = converter.convert(record.hanzi)
        else:
            return None
        return variant if variant != record.hanzi else None
