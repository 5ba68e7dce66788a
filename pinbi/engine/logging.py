"""
统一日志配置模块

控制台彩色 / JSON 输出；文件轮转日志默认关闭，由服务进程或 PINBI_LOG_TO_FILE 开启
"""

import os
import sys
import time
import logging
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

import orjson


# 安装到 site-packages 时包目录不可写，日志放在用户目录下
LOG_DIR = Path(os.getenv('PINBI_LOG_DIR', Path.home() / '.pinbi' / 'logs'))

_OFF_VALUES = ('0', 'false', 'no', 'off')

DETAILED_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s'
SIMPLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(message)s'


class JsonFormatter(logging.Formatter):
    """JSON 行格式，附带 request_id / duration_ms（如有）"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }
        for extra in ('request_id', 'duration_ms'):
            if hasattr(record, extra):
                payload[extra] = getattr(record, extra)
        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)
        return orjson.dumps(payload).decode('utf-8')


class ColorFormatter(logging.Formatter):
    """彩色控制台输出"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        record.levelname = f"{self.COLORS.get(plain, '')}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def _file_logging_enabled(default: str = '0') -> bool:
    return os.getenv('PINBI_LOG_TO_FILE', default).strip().lower() not in _OFF_VALUES


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter,
                      max_bytes: int, backup_count: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    name: str = 'pinbi',
    level: str = 'INFO',
    log_to_file: Optional[bool] = None,
    log_to_console: bool = True,
    json_format: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    配置日志器（重复调用会替换已有 handlers）

    Args:
        name: 日志器名称
        level: 日志级别
        log_to_file: 是否写入 LOG_DIR（None 时看 PINBI_LOG_TO_FILE，默认不写）
        log_to_console: 是否输出到 stdout
        json_format: 使用 JSON 行格式
        max_bytes / backup_count: 文件轮转参数
    """
    if log_to_file is None:
        log_to_file = _file_logging_enabled()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_to_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(logging.DEBUG)
        if json_format:
            console.setFormatter(JsonFormatter())
        elif sys.stdout.isatty():
            console.setFormatter(ColorFormatter(SIMPLE_FORMAT))
        else:
            console.setFormatter(logging.Formatter(SIMPLE_FORMAT))
        logger.addHandler(console)

    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        main_format = JsonFormatter() if json_format else logging.Formatter(DETAILED_FORMAT)
        logger.addHandler(_rotating_handler(
            LOG_DIR / f'{name}.log', logging.DEBUG, main_format, max_bytes, backup_count))
        # 错误单独一份
        logger.addHandler(_rotating_handler(
            LOG_DIR / f'{name}_error.log', logging.ERROR, logging.Formatter(DETAILED_FORMAT),
            max_bytes, backup_count))

    return logger


_loggers: Dict[str, logging.Logger] = {}


def _named_logger(name: str) -> logging.Logger:
    if name not in _loggers:
        _loggers[name] = setup_logging(name, level=os.getenv('PINBI_LOG_LEVEL', 'INFO'))
    return _loggers[name]


def get_api_logger() -> logging.Logger:
    """获取 API 日志器"""
    return _named_logger('pinbi.api')


def get_engine_logger() -> logging.Logger:
    """获取引擎日志器"""
    return _named_logger('pinbi.engine')


def enable_file_logging() -> bool:
    """
    服务进程启动时调用：给 API / 引擎日志器加上文件输出。
    PINBI_LOG_TO_FILE 显式关闭时不做处理，返回是否已开启。
    """
    if not _file_logging_enabled(default='1'):
        return False
    level = os.getenv('PINBI_LOG_LEVEL', 'INFO')
    for name in ('pinbi.api', 'pinbi.engine'):
        _loggers[name] = setup_logging(name, level=level, log_to_file=True)
    return True


def log_execution_time(logger: Optional[logging.Logger] = None):
    """装饰器：DEBUG 级别记录耗时（duration_ms 写入 JSON 日志），异常时记 ERROR 后继续抛出"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            log = logger or get_engine_logger()
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                log.error(f"{func.__qualname__} 执行失败, 耗时: {elapsed:.2f}ms, 错误: {e}",
                          extra={'duration_ms': round(elapsed, 2)})
                raise
            elapsed = (time.perf_counter() - start) * 1000
            log.debug(f"{func.__qualname__} 执行完成, 耗时: {elapsed:.2f}ms",
                      extra={'duration_ms': round(elapsed, 2)})
            return result
        return wrapper
    return decorator
