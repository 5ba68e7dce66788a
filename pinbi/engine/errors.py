"""
引擎异常定义
"""

from typing import Optional


class PinbiError(Exception):
    """pinbi 异常基类"""


class DataLoadError(PinbiError):
    """参考数据加载失败（文件缺失或格式错误）"""

    def __init__(self, reason: str, path: Optional[str] = None):
        self.reason = reason
        self.path = path
        message = f"{reason}: {path}" if path else reason
        super().__init__(message)
