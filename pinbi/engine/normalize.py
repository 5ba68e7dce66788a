"""
文本规范化

比较前统一大小写、去掉声调符号等附加符号
"""

import re
import unicodedata

_COMBINING_MARKS = re.compile('[\u0300-\u036f]')
_DIAERESIS_U = 'u\u0308'

# đ/Đ 不是组合字符，NFD 拆不开，需要单独折叠
_GENERAL_FOLDS = str.maketrans({'đ': 'd', 'Đ': 'd'})


def normalize_general(text: str) -> str:
    """释义、例句等普通文本：去附加符号、折叠 đ、转小写"""
    if not text:
        return ""
    decomposed = unicodedata.normalize('NFD', text)
    return _COMBINING_MARKS.sub('', decomposed).translate(_GENERAL_FOLDS).lower().strip()


def normalize_romanization(text: str) -> str:
    """拼音文本：去声调、ü（含带调形式）→ v、转小写"""
    if not text:
        return ""
    decomposed = unicodedata.normalize('NFD', text.lower())
    # ü/ǖ/ǘ/ǚ/ǜ 分解后都以 u + 分音符开头
    decomposed = decomposed.replace(_DIAERESIS_U, 'v')
    return _COMBINING_MARKS.sub('', decomposed).strip()
