"""
声调标注模块

按拼音标调规则把声调数字转换为带调字母：
1. 有 a 或 e 时，标在最先出现的 a / e 上
2. 否则有 ou 时，标在 o 上
3. 否则从右往左找到的第一个元音（即最后一个元音）
"""

import re
from typing import Dict, Optional, Tuple


# 字母 → [无调, 一声, 二声, 三声, 四声]
TONE_TABLE: Dict[str, Tuple[str, ...]] = {
    'a': ('a', 'ā', 'á', 'ǎ', 'à'),
    'e': ('e', 'ē', 'é', 'ě', 'è'),
    'i': ('i', 'ī', 'í', 'ǐ', 'ì'),
    'o': ('o', 'ō', 'ó', 'ǒ', 'ò'),
    'u': ('u', 'ū', 'ú', 'ǔ', 'ù'),
    'ü': ('ü', 'ǖ', 'ǘ', 'ǚ', 'ǜ'),
    'v': ('v', 'ǖ', 'ǘ', 'ǚ', 'ǜ'),  # v 作为 ü 的替代输入
    'n': ('n', 'n̄', 'ń', 'ň', 'ǹ'),
    'm': ('m', 'm̄', 'ḿ', 'm̌', 'm̀'),
}

VOWELS = frozenset('aeiouüv')
VALID_TONES = (1, 2, 3, 4)

_TRAILING_DIGITS = re.compile(r'[0-9]+\Z')


def tone_forms(letter: str) -> Optional[Tuple[str, ...]]:
    """返回字母的五种声调形式，没有对应行时返回 None"""
    return TONE_TABLE.get(letter.lower())


def _mark(text: str, index: int, tone: int) -> str:
    toned = TONE_TABLE[text[index].lower()][tone]
    return text[:index] + toned + text[index + 1:]


def apply_tone(text: str, tone: int) -> str:
    """
    给音节标调

    Args:
        text: 音节文本，如 "hao"（末尾的声调数字会被去掉）
        tone: 声调 1-4，其它值原样返回

    Returns:
        标调后的文本，如 "hǎo"
    """
    if tone not in VALID_TONES:
        return text

    clean = _TRAILING_DIGITS.sub('', text)

    # a / e 优先，谁先出现标谁
    for index, char in enumerate(clean):
        if char in ('a', 'e'):
            return _mark(clean, index, tone)

    index = clean.find('ou')
    if index >= 0:
        return _mark(clean, index, tone)

    for index in range(len(clean) - 1, -1, -1):
        if clean[index].lower() in VOWELS:
            # 大写字母也替换成小写带调字母
            return _mark(clean, index, tone)

    return clean
