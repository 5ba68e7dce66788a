"""
日志配置测试
"""

import logging
from logging.handlers import RotatingFileHandler

import orjson
import pytest

from pinbi.engine import DataLoadError, ReferenceDataStore, enable_file_logging, setup_logging
from pinbi.engine.logging import JsonFormatter, _file_logging_enabled, log_execution_time


class TestJsonFormatter:

    def test_fields(self):
        record = logging.LogRecord("pinbi.test", logging.INFO, __file__, 10, "加载 %d 词", (5,), None)
        record.request_id = "abc123"
        data = orjson.loads(JsonFormatter().format(record))
        assert data["message"] == "加载 5 词"
        assert data["level"] == "INFO"
        assert data["request_id"] == "abc123"


class TestSetupLogging:

    def test_no_duplicate_handlers(self):
        logger = setup_logging("pinbi.test", log_to_file=False)
        logger = setup_logging("pinbi.test", log_to_file=False)
        assert len(logger.handlers) == 1

    def test_file_handlers(self, tmp_path, monkeypatch):
        monkeypatch.setattr("pinbi.engine.logging.LOG_DIR", tmp_path)
        logger = setup_logging("pinbi.filetest", log_to_file=True, log_to_console=False)
        logger.error("出错了")
        for handler in logger.handlers:
            handler.flush()
        assert "出错了" in (tmp_path / "pinbi.filetest_error.log").read_text(encoding="utf-8")
        setup_logging("pinbi.filetest", log_to_file=False, log_to_console=False)


class TestFileLoggingOptIn:
    """作为库使用时默认不写日志文件"""

    def test_off_by_default(self, monkeypatch, tmp_path):
        monkeypatch.delenv("PINBI_LOG_TO_FILE", raising=False)
        monkeypatch.setattr("pinbi.engine.logging.LOG_DIR", tmp_path / "logs")
        assert _file_logging_enabled() is False
        logger = setup_logging("pinbi.optin", log_to_console=False)
        assert logger.handlers == []
        assert not (tmp_path / "logs").exists()

    def test_server_enables_files(self, monkeypatch, tmp_path):
        monkeypatch.delenv("PINBI_LOG_TO_FILE", raising=False)
        monkeypatch.setattr("pinbi.engine.logging.LOG_DIR", tmp_path)
        try:
            assert enable_file_logging() is True
            handlers = logging.getLogger("pinbi.engine").handlers
            assert any(isinstance(h, RotatingFileHandler) for h in handlers)
            assert (tmp_path / "pinbi.engine.log").exists()
        finally:
            setup_logging("pinbi.api", log_to_file=False)
            setup_logging("pinbi.engine", log_to_file=False)

    def test_explicitly_disabled(self, monkeypatch):
        monkeypatch.setenv("PINBI_LOG_TO_FILE", "0")
        assert enable_file_logging() is False


class TestLogExecutionTime:

    def test_returns_result(self):
        @log_execution_time(logging.getLogger("pinbi.test"))
        def add(a, b):
            return a + b

        assert add(1, 2) == 3

    def test_store_build_is_timed(self, store, caplog):
        caplog.set_level(logging.DEBUG, logger="pinbi.engine")
        store.load()
        timed = [r for r in caplog.records if "ReferenceDataStore._build 执行完成" in r.getMessage()]
        assert len(timed) == 1
        assert timed[0].duration_ms >= 0

    def test_failed_build_logged_and_raised(self, tmp_path, caplog):
        caplog.set_level(logging.DEBUG, logger="pinbi.engine")
        store = ReferenceDataStore(data_dir=tmp_path, derive_variants=False)
        with pytest.raises(DataLoadError):
            store.load()
        assert any(
            r.levelno == logging.ERROR and "ReferenceDataStore._build 执行失败" in r.getMessage()
            for r in caplog.records
        )
