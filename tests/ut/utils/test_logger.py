"""logger.py 单元测试"""

from __future__ import annotations

import json
import logging

from depscope.utils.logger import JSONFormatter, reset_logging, setup_from_env, setup_logging


class TestSetupLogging:
    def test_no_duplicate_handlers(self) -> None:
        setup_logging("DEBUG")
        setup_logging("INFO")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.INFO
        reset_logging()
        assert root.handlers == []

    def test_unknown_level_falls_back(self) -> None:
        setup_logging("NOPE")
        assert logging.getLogger().level == logging.INFO
        reset_logging()


class TestJSONFormatter:
    def test_fields(self) -> None:
        record = logging.LogRecord(
            "depscope.registry", logging.WARNING, __file__, 10, "注册表不可达: %s", ("x",), None,
        )
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "WARNING"
        assert data["logger"] == "depscope.registry"
        assert data["message"] == "注册表不可达: x"
        assert "exception" not in data


class TestSetupFromEnv:
    def test_env_level_and_json(self, monkeypatch) -> None:
        monkeypatch.setenv("DEPSCOPE_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("DEPSCOPE_LOG_JSON", "1")
        setup_from_env()
        root = logging.getLogger()
        assert root.level == logging.ERROR
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        reset_logging()

    def test_default_warning_and_debug_override(self, monkeypatch) -> None:
        monkeypatch.delenv("DEPSCOPE_LOG_LEVEL", raising=False)
        setup_from_env()
        assert logging.getLogger().level == logging.WARNING
        setup_from_env(debug=True)
        assert logging.getLogger().level == logging.DEBUG
        reset_logging()
