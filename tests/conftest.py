"""
测试公共夹具
"""

import os

os.environ.setdefault("PINBI_LOG_TO_FILE", "0")

import orjson
import pytest

from pinbi.engine import EngineConfig, PinyinEngine, ReferenceDataStore


def record(hanzi, pinyin, meaning="", example=None, **extra):
    data = {"id": f"id-{hanzi}", "index": 0, "word": {"hanzi": hanzi, "pinyin": pinyin}, "meaning": meaning}
    if example is not None:
        data["example"] = example
    data.update(extra)
    return data


SAMPLE_LEVELS = [
    [
        record("爱", "ài", "to love", {"hanzi": "我爱你", "pinyin": "wǒ ài nǐ", "meaning": "I love you"}),
        record("你", "nǐ", "you"),
        record("好", "hǎo", "good; well"),
        record("你好", "nǐ hǎo", "hello"),
        record("女儿", "nǚ ér", "daughter"),
    ],
    [
        record("南方", "nán fāng", "south; southern part"),
        record("年华", "nián huá", "time; years; age"),
        record("好", "hǎo", "good; fine"),
    ],
    [
        record("难能可贵", "nán néng kě guì", "rare and commendable"),
        record("绿", "lǜ", "green"),
        record("旅游", "lǚ yóu", "to travel; tourism"),
    ],
]


def write_levels(directory, levels):
    """把各级别数据写成 hsk1.json, hsk2.json ..."""
    directory.mkdir(parents=True, exist_ok=True)
    for level, records in enumerate(levels, 1):
        (directory / f"hsk{level}.json").write_bytes(orjson.dumps(records))
    return directory


@pytest.fixture
def data_dir(tmp_path):
    return write_levels(tmp_path / "hsk", SAMPLE_LEVELS)


@pytest.fixture
def config(data_dir):
    return EngineConfig(data_dir=str(data_dir), levels=len(SAMPLE_LEVELS), derive_variants=False)


@pytest.fixture
def store(config):
    return ReferenceDataStore.from_config(config)


@pytest.fixture
def engine(config):
    return PinyinEngine(config)
